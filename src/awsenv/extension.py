#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Inject the AWS connection into the environment of a launch configuration.

## Overview

`AwsConnectionExtension` is the single entry point used when a launch
configuration is about to start a process. A call to
`AwsConnectionExtension.add_environment_variables` performs one injection
attempt:

1. The `awsenv.settings.ApplicabilityGate` decides whether to proceed. If it
   declines, nothing else happens and no telemetry is reported.

2. The injection options attached to the configuration are used. If none are
   attached and the global setting is `Always`, the current connection is used.

3. The `awsenv.resolver.ConnectionResolver` resolves the options into a
   connection.

4. The `awsenv.inject.EnvironmentInjector` writes the variables into the
   environment.

5. The `awsenv.telemetry.TelemetryReporter` records exactly one `Succeeded` or
   `Failed` event.

No error escapes from step 3 or 4. A failure is logged and reported, and the
process is launched without AWS variables:

    extension = AwsConnectionExtension(gate, resolver)
    env = dict(os.environ)
    extension.add_environment_variables(run_config, env, describe=lambda: 'make')
    subprocess.run(run_config.command, env=env)

The extension also reads and writes the injection options of a configuration
as part of the configuration's XML element. See `awsenv.options`.
"""

import logging

from awsenv import options as codec
from awsenv.inject import EnvironmentInjector
from awsenv.options import InjectionOptions
from awsenv.telemetry import Result, TelemetryReporter

LOG = logging.getLogger(__name__)


class AwsConnectionExtension:
    """Injects AWS connections into launch configurations.

    `gate` is an `awsenv.settings.ApplicabilityGate` and `resolver` is an
    `awsenv.resolver.ConnectionResolver`. `injector` and `reporter` default to
    an `awsenv.inject.EnvironmentInjector` and an
    `awsenv.telemetry.TelemetryReporter` that logs. Configurations whose `kind`
    is in `unsupported_kinds` are never injected.
    """

    def __init__(
        self, gate, resolver, injector=None, reporter=None, unsupported_kinds=()
    ):
        self._gate = gate
        self._resolver = resolver
        self._injector = injector if injector is not None else EnvironmentInjector()
        self._reporter = reporter if reporter is not None else TelemetryReporter()
        self._unsupported_kinds = frozenset(unsupported_kinds)

    def is_applicable_for(self, configuration):
        """Returns whether injection may run for `configuration` at all."""
        return (
            self._gate.is_applicable()
            and configuration.kind not in self._unsupported_kinds
        )

    def add_environment_variables(self, configuration, environment, describe=None):
        """Injects the connection for `configuration` into `environment`.

        `configuration` is an `awsenv.runconfig.RunConfiguration` and
        `environment` a mutable mapping that is updated in place. `describe` is
        an optional callable returning a string that is attached to the
        telemetry event. Returns `True` if variables were injected.
        """
        if not self.is_applicable_for(configuration):
            LOG.debug("injection not applicable for %s", configuration.name)
            return False

        options = configuration.aws_connection
        if not self._gate.should_inject(options is None):
            LOG.debug("injection not configured for %s", configuration.name)
            return False

        # Only reachable with the Always setting.
        if options is None:
            options = InjectionOptions(use_current_connection=True)

        try:
            connection = self._resolver.resolve(options, configuration.project)
            self._injector.inject(connection, environment)
            result = Result.Succeeded

        except Exception as e:  # pylint: disable=broad-except
            LOG.error(
                "unable to inject AWS connection into %s: %s",
                configuration.name,
                e,
                exc_info=True,
            )
            result = Result.Failed

        self._reporter.report(result, _describe(describe))
        return result == Result.Succeeded

    def read_external(self, configuration, element):
        """Loads the injection options of `configuration` from `element`."""
        try:
            configuration.aws_connection = codec.read_from(element)

        except Exception as e:  # pylint: disable=broad-except
            LOG.warning(
                "unreadable AWS connection options in %s, using defaults: %s",
                configuration.name,
                e,
            )
            configuration.aws_connection = InjectionOptions()

    def write_external(self, configuration, element):
        """Stores the injection options of `configuration` into `element`."""
        codec.write_into(element, configuration.aws_connection)


def _describe(describe):
    if describe is None:
        return None
    try:
        return describe()
    except Exception as e:  # pylint: disable=broad-except
        LOG.debug("cannot describe launch for telemetry: %s", e)
        return None
