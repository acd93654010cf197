#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Write a resolved connection into a process environment."""

import logging

from awsenv.connection import AWS_SESSION_TOKEN, environment_variables

LOG = logging.getLogger(__name__)


class EnvironmentInjector:
    """Injects AWS environment variables into a mutable environment mapping."""

    def inject(self, settings, target):
        """Writes the variables for `settings` into `target`.

        `target` is a mutable mapping of str to str, such as the environment
        dict passed to `subprocess.run`. Existing keys with the same names are
        overwritten, and an existing `AWS_SESSION_TOKEN` is removed when the
        injected credentials are long-lived. All variables are derived before
        `target` is touched, so a failure leaves `target` unchanged.
        """
        new_vars = environment_variables(settings)
        LOG.info("injecting %s for %s", sorted(new_vars), settings)
        if AWS_SESSION_TOKEN not in new_vars:
            target.pop(AWS_SESSION_TOKEN, None)
        target.update(new_vars)
