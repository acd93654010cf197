#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Launch a command with an AWS connection injected into its environment.

## Overview

The `awsenv` CLI resolves an AWS connection, injects it into the environment
of a command as `AWS_ACCESS_KEY_ID`, `AWS_SECRET_ACCESS_KEY`,
`AWS_SESSION_TOKEN`, `AWS_REGION`, and `AWS_DEFAULT_REGION`, and runs the
command. Its exit status is the exit status of the command. Separate the
command from the awsenv flags with `--`:

    $ awsenv --region us-east-1 --credential profile:default -- aws s3 ls

To follow the current connection defined in the user configuration instead of
pinning one:

    $ awsenv --use-current -- terraform plan

Launch configurations can be saved and launched again later. The saved file
records the command, extra environment variables, and the connection choice:

    $ awsenv --run-config deploy.xml --use-current --env STAGE=prod --save -- make deploy
    $ awsenv --run-config deploy.xml

If the connection cannot be resolved, the error is logged, a `Failed`
telemetry event is recorded, and the command still runs without the AWS
variables. Use `--log-level ERROR` or lower to see why.

## Configuration

The user configuration is read from `~/.awsenv.yaml`, or from the file named by
the `AWSENV_CONFIG` environment variable. See `awsenv.config` for its format.
The `CLI` block provides defaults for the flags below:

    CLI:
      log_level: STRING

## Options

    --run-config FILE       launch configuration to load, and to save with --save
    --name NAME             name of a new launch configuration
    --project NAME          project context used to look up the current connection
    --use-current           use the current connection
    --region REGION         region code of an explicit connection
    --credential ID         credential identifier of an explicit connection
    --env KEY=VALUE         extra environment variable for the command
    --save                  save the launch configuration to --run-config
    --print-env             print the injected AWS variables instead of launching
    --list-credentials      list the known credential identifiers
    --list-regions          list the known region codes
    --log-level LEVEL       DEBUG, INFO, WARN, or ERROR

Set `AWSENV_TRACE=1` to print a stack trace when awsenv itself fails.
"""

import argparse
import logging
import os
import subprocess
import sys
import traceback
from functools import partial
from pathlib import Path

from awsenv import __version__
from awsenv.ambient import AmbientConnectionManager
from awsenv.argparse import RawAndDefaultsFormatter, SetKeyValuePair
from awsenv.config import Choice, Config
from awsenv.connection import VARIABLE_NAMES
from awsenv.credentials import CredentialStore
from awsenv.extension import AwsConnectionExtension
from awsenv.options import InjectionOptions
from awsenv.plugmgr import PluginManager
from awsenv.regions import BotocoreRegionCatalog
from awsenv.resolver import ConnectionResolver
from awsenv.runconfig import RunConfiguration
from awsenv.settings import ApplicabilityGate
from awsenv.telemetry import TelemetryReporter, TelemetrySink

LOG = logging.getLogger(__name__)

SHORT_DESCRIPTION = """
Launch a command with an AWS connection injected into its environment.
Separate the command from awsenv flags with --.
""".strip()


# setup.py establishes this as the entry point for the awsenv CLI.
def main():
    """The main entry point for the `awsenv` CLI tool installed with this package.

    Exits with the status of the launched command. If awsenv itself fails, the
    error message is printed to standard error and the status is 1. Set the
    `AWSENV_TRACE` environment variable to include a stack trace.
    """
    try:
        sys.exit(_cli())

    except Exception as e:  # pylint: disable=broad-except
        if os.getenv("AWSENV_TRACE"):
            traceback.print_exc(file=sys.stderr)

        print(e, file=sys.stderr)
        sys.exit(1)


def _cli(argv=None):
    """Parses command line arguments and runs the awsenv CLI.

    Returns the exit status. `argv` defaults to `sys.argv[1:]`.
    """
    config = Config.from_file(
        os.environ.get("AWSENV_CONFIG", Path.home() / ".awsenv.yaml")
    )
    cfg = partial(config.get, "CLI")

    # The help flag and the command are added after the plug-ins have
    # registered their own flags, so --help describes those too.
    parser = argparse.ArgumentParser(
        prog="awsenv",
        add_help=False,
        allow_abbrev=False,
        formatter_class=RawAndDefaultsFormatter,
        description=SHORT_DESCRIPTION,
    )

    run_group = parser.add_argument_group("launch configuration options")
    run_group.add_argument(
        "--run-config",
        metavar="FILE",
        help="launch configuration to load, and to save with --save",
    )
    run_group.add_argument("--name", help="name of a new launch configuration")
    run_group.add_argument(
        "--project",
        metavar="NAME",
        help="project context used to look up the current connection",
    )
    run_group.add_argument(
        "--env",
        metavar="KEY=VALUE",
        action=SetKeyValuePair,
        default={},
        help="extra environment variable for the command",
    )
    run_group.add_argument(
        "--save", action="store_true", help="save the launch configuration"
    )

    conn_group = parser.add_argument_group("connection options")
    conn_group.add_argument(
        "--use-current", action="store_true", help="use the current connection"
    )
    conn_group.add_argument(
        "--region", metavar="REGION", help="region code of an explicit connection"
    )
    conn_group.add_argument(
        "--credential",
        metavar="ID",
        help="credential identifier of an explicit connection",
    )

    parser.add_argument(
        "--print-env",
        action="store_true",
        help="print the injected AWS variables instead of launching",
    )
    parser.add_argument(
        "--list-credentials",
        action="store_true",
        help="list the known credential identifiers",
    )
    parser.add_argument(
        "--list-regions", action="store_true", help="list the known region codes"
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s " + __version__
    )
    parser.add_argument(
        "--log-level",
        default=cfg(
            "log_level", type=Choice("DEBUG", "INFO", "WARN", "ERROR"), default="ERROR"
        ),
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        help="set the logging level",
    )

    # Everything after the first -- belongs to the launched command.
    argv = sys.argv[1:] if argv is None else list(argv)
    command = None
    if "--" in argv:
        split = argv.index("--")
        argv, command = argv[:split], argv[split + 1 :]

    args, remaining_argv = parser.parse_known_args(argv)

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    plugin_mgr = PluginManager(config, parser, args, remaining_argv)
    plugin_mgr.parse_args("Credentials", default="awsenv.plugins.creds.Default")
    plugin_mgr.parse_args("Telemetry", default="awsenv.plugins.telemetry.Default")

    parser.add_argument("-h", "--help", action="help")
    parser.add_argument(
        "command", nargs=argparse.REMAINDER, default=[], help="command to launch"
    )
    args = parser.parse_args(plugin_mgr.remaining_argv, plugin_mgr.args)
    if command is not None:
        if args.command:
            parser.error(f"unrecognized arguments: {' '.join(args.command)}")
        args.command = command

    if args.save and not args.run_config:
        parser.error("--save requires --run-config")

    store = plugin_mgr.instantiate("Credentials", must_be=CredentialStore)
    sink = plugin_mgr.instantiate("Telemetry", must_be=TelemetrySink)
    catalog = BotocoreRegionCatalog()

    if args.list_regions:
        for region in sorted(catalog.regions().values()):
            print(f"{region.id:16}  {region.name}")
        return 0

    if args.list_credentials:
        for identifier in store.identifiers().values():
            print(f"{identifier.id}  ({identifier.display_name})")
        return 0

    ambient = AmbientConnectionManager.from_config(
        partial(config.get, "Connection"), store, catalog
    )
    extension = AwsConnectionExtension(
        ApplicabilityGate.from_config(partial(config.get, "Settings")),
        ConnectionResolver(store, catalog, ambient),
        reporter=TelemetryReporter(sink),
    )

    run_config = _build_run_config(args, extension)

    if args.save:
        run_config.save(args.run_config, extension)
        print(f"Saved {run_config.name} to {args.run_config}", file=sys.stderr)

    env = dict(os.environ)
    env.update(run_config.environment)
    injected = extension.add_environment_variables(
        run_config, env, describe=lambda: Path(run_config.command[0]).name
    )

    if args.print_env:
        if injected:
            for key in VARIABLE_NAMES:
                if key in env:
                    print(f"export {key}={env[key]}")
        return 0

    if not run_config.command:
        if args.save:
            return 0
        parser.error("no command to launch")

    LOG.info("launching %s", run_config.command)
    return subprocess.run(run_config.command, env=env, check=False).returncode


def _build_run_config(args, extension):
    """Returns the launch configuration described by the parsed `args`.

    An existing --run-config file is loaded first. Flags given on the command
    line then override what was loaded.
    """
    path = Path(args.run_config) if args.run_config else None

    if path and path.is_file():
        run_config = RunConfiguration.load(path, extension)
    else:
        name = args.name or (path.stem if path else "default")
        run_config = RunConfiguration(name, [])

    if args.name:
        run_config.name = args.name
    if args.command:
        run_config.command = args.command
    if args.project:
        run_config.project = args.project
    run_config.environment.update(args.env)

    if args.use_current or args.region or args.credential:
        options = (
            run_config.aws_connection.copy()
            if run_config.aws_connection
            else InjectionOptions()
        )
        options.use_current_connection = args.use_current
        if args.region:
            options.region = args.region
        if args.credential:
            options.credential = args.credential
        run_config.aws_connection = options

    return run_config


if __name__ == "__main__":
    main()
