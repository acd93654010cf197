#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Plug-ins for credential lookup.

To configure the awsenv CLI to use one of these plug-ins, or a user-defined
plug-in, specify a `Credentials` block in the user configuration file:

    Credentials:
      plugin: PYTHON_MODULE.CLASSNAME
      options:
        ARG1: VAL1

The `plugin` key may be one of the following values:

awsenv.plugins.creds.Profile
:  `Profile` uses the profiles in the standard AWS configuration files.

your.own.module.PluginSubclass
:  A custom plug-in that subclasses `awsenv.plugmgr.Plugin` and returns an
`awsenv.credentials.CredentialStore`.
"""

from awsenv.credentials import ProfileCredentialStore
from awsenv.plugmgr import Plugin

__all__ = ["Profile"]


class Profile(Plugin):
    """CLI plug-in that exposes AWS profiles as credentials.

    Every profile defined in ~/.aws/config or ~/.aws/credentials becomes a
    credential with the identifier `profile:NAME`, for example
    `profile:default`.

    ## Configuration

        Credentials:
          plugin: awsenv.plugins.creds.Profile

    ## Plug-in Options

    There are no options for this plug-in.
    """

    def instantiate(self, args):
        return ProfileCredentialStore()


Default = Profile
"""Default credential plug-in used if one is not configured by the user."""
