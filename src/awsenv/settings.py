#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""The global setting that controls whether credentials are injected at all.

The setting lives in the `Settings` block of the user configuration:

    Settings:
      inject_credentials: OnlyIfConfigured

`Always`
:  Inject into every launch. Launch configurations without their own options
follow the current connection.

`Never`
:  Never inject, even into configurations that have options.

`OnlyIfConfigured`
:  Inject only into launch configurations with their own options. This is the
default when the setting is absent.
"""

from enum import Enum

from awsenv.config import Choice


class InjectCredentials(Enum):
    """Values of the global injection setting."""

    Always = "Always"
    Never = "Never"
    OnlyIfConfigured = "OnlyIfConfigured"


class ApplicabilityGate:
    """Decides whether injection runs, based on an `InjectCredentials` setting."""

    def __init__(self, setting=None):
        self.setting = setting if setting is not None else InjectCredentials.OnlyIfConfigured

    @classmethod
    def from_config(cls, cfg):
        """Returns a gate from a `Settings`-rooted `awsenv.config.Config.get` callable."""
        value = cfg(
            "inject_credentials",
            type=Choice(*(s.value for s in InjectCredentials)),
            default=InjectCredentials.OnlyIfConfigured.value,
        )
        return cls(InjectCredentials(value))

    def is_applicable(self):
        return self.setting != InjectCredentials.Never

    def should_inject(self, explicit_opt_out):
        """Returns whether to inject for a launch configuration.

        `explicit_opt_out` is true when the configuration has no injection
        options of its own.
        """
        if self.setting == InjectCredentials.Never:
            return False
        if self.setting == InjectCredentials.Always:
            return True
        return not explicit_opt_out
