#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Plug-ins for the awsenv CLI.

The awsenv CLI supports two pluggable behaviors: **credential lookup** and
**telemetry**. Built-in plug-ins live in `awsenv.plugins.creds` and
`awsenv.plugins.telemetry`. Users may provide their own, so long as they are
installed in the standard Python path.

To select a plug-in, add a plug-in specification to the user configuration:

    PLUGIN_NAME:
      plugin: PYTHON_MODULE.CLASSNAME
      options:
        ARG1: VAL1

`PLUGIN_NAME` is either `Credentials` or `Telemetry`. `plugin` is the dotted
path of an `awsenv.plugmgr.Plugin` subclass, and the optional `options` are
made available to it. Only one plug-in is used per behavior.

Non-CLI users of awsenv will not use this module.
"""
