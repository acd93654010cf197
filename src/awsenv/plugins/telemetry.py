#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Plug-ins for telemetry.

To configure where the awsenv CLI reports injection outcomes, specify a
`Telemetry` block in the user configuration file:

    Telemetry:
      plugin: PYTHON_MODULE.CLASSNAME
      options:
        ARG1: VAL1

The `plugin` key may be one of the following values:

awsenv.plugins.telemetry.Log
:  `Log` writes events to the log. This is the default.

awsenv.plugins.telemetry.JSONLines
:  `JSONLines` appends events to a file as JSON lines.

awsenv.plugins.telemetry.Disabled
:  `Disabled` discards events.

your.own.module.PluginSubclass
:  A custom plug-in that subclasses `awsenv.plugmgr.Plugin` and returns an
`awsenv.telemetry.TelemetrySink`.
"""

from pathlib import Path

from awsenv.config import Str
from awsenv.plugmgr import Plugin
from awsenv.telemetry import JSONLinesSink, LoggingSink, NullSink

__all__ = ["Log", "JSONLines", "Disabled"]


class Log(Plugin):
    """CLI plug-in that logs telemetry events at INFO level.

    ## Configuration

        Telemetry:
          plugin: awsenv.plugins.telemetry.Log
    """

    def instantiate(self, args):
        return LoggingSink()


Default = Log
"""Default telemetry plug-in used if one is not configured by the user."""


class JSONLines(Plugin):
    """CLI plug-in that appends telemetry events to a file.

    ## Configuration

        Telemetry:
          plugin: awsenv.plugins.telemetry.JSONLines
          options:
            path: STRING

    ## Plug-in Options

    Each option is also available as a CLI flag, which takes precedence.

    path
    :  File to append events to. Defaults to ~/.awsenv-telemetry.jsonl. The
    `--telemetry-path` flag overrides this value.
    """

    def __init__(self, parser, cfg):
        super().__init__(parser, cfg)

        group = parser.add_argument_group("telemetry options")
        group.add_argument(
            "--telemetry-path",
            metavar="FILE",
            default=cfg("path", type=Str, default=str(Path.home() / ".awsenv-telemetry.jsonl")),
            help="file to append telemetry events to",
        )

    def instantiate(self, args):
        return JSONLinesSink(Path(args.telemetry_path).expanduser())


class Disabled(Plugin):
    """CLI plug-in that discards telemetry events.

    ## Configuration

        Telemetry:
          plugin: awsenv.plugins.telemetry.Disabled
    """

    def instantiate(self, args):
        return NullSink()
