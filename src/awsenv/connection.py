#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Resolved AWS connections and the environment variables derived from them."""

from collections import namedtuple

AWS_ACCESS_KEY_ID = "AWS_ACCESS_KEY_ID"
AWS_SECRET_ACCESS_KEY = "AWS_SECRET_ACCESS_KEY"
AWS_SESSION_TOKEN = "AWS_SESSION_TOKEN"
AWS_REGION = "AWS_REGION"
AWS_DEFAULT_REGION = "AWS_DEFAULT_REGION"

VARIABLE_NAMES = (
    AWS_ACCESS_KEY_ID,
    AWS_SECRET_ACCESS_KEY,
    AWS_SESSION_TOKEN,
    AWS_REGION,
    AWS_DEFAULT_REGION,
)


class ConnectionSettings(namedtuple("ConnectionSettings", ["credential", "region"])):
    """An immutable pair of a credential provider and a region.

    `credential` is an `awsenv.credentials.CredentialProvider` and `region` is
    an `awsenv.regions.Region`. Instances are created per resolution and are
    never cached.
    """

    __slots__ = ()

    def __str__(self):
        return f"{self.credential.id}@{self.region.id}"


def environment_variables(settings):
    """Returns a dict of the AWS environment variables for `settings`.

    The credentials are resolved first, so either the complete set of variables
    is returned or an exception is raised. `AWS_SESSION_TOKEN` is only included
    for temporary credentials.
    """
    creds = settings.credential.resolve_credentials()

    env = {
        AWS_ACCESS_KEY_ID: creds.access_key,
        AWS_SECRET_ACCESS_KEY: creds.secret_key,
    }
    if creds.token:
        env[AWS_SESSION_TOKEN] = creds.token

    env[AWS_REGION] = settings.region.id
    env[AWS_DEFAULT_REGION] = settings.region.id
    return env
