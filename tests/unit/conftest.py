#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import pytest
from botocore.credentials import ReadOnlyCredentials

from awsenv.ambient import AmbientConnectionManager
from awsenv.credentials import (
    CredentialIdentifier,
    CredentialProviderException,
    CredentialStore,
)
from awsenv.regions import Region, StaticRegionCatalog


class FakeProvider:
    def __init__(self, identifier, creds):
        self.identifier = identifier
        self.creds = creds

    @property
    def id(self):
        return self.identifier.id

    def resolve_credentials(self):
        if isinstance(self.creds, Exception):
            raise self.creds
        return self.creds


class FakeCredentialStore(CredentialStore):
    def __init__(self, creds, broken=()):
        self.creds = creds
        self.broken = set(broken)
        self.materialized = []

    def identifiers(self):
        return {i: CredentialIdentifier(i, i) for i in self.creds}

    def credential_provider(self, identifier, region):
        self.materialized.append((identifier.id, region.id))
        if identifier.id in self.broken:
            raise CredentialProviderException(f"secret missing for {identifier.id}")
        return FakeProvider(identifier, self.creds[identifier.id])


@pytest.fixture
def region_catalog():
    return StaticRegionCatalog(
        [
            Region("us-east-1", "US East (N. Virginia)", "aws"),
            Region("eu-west-1", "Europe (Ireland)", "aws"),
        ]
    )


@pytest.fixture
def credential_store():
    return FakeCredentialStore(
        {
            "profile:default": ReadOnlyCredentials("AKIADEFAULT", "default-secret", None),
            "profile:sts": ReadOnlyCredentials("ASIASTS", "sts-secret", "sts-token"),
            "profile:broken": ReadOnlyCredentials("AKIABROKEN", "broken-secret", None),
            "profile:expired": RuntimeError("token expired"),
        },
        broken=["profile:broken"],
    )


@pytest.fixture
def ambient(credential_store, region_catalog):
    return AmbientConnectionManager(credential_store, region_catalog)
