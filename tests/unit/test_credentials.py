#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import botocore.exceptions
import pytest
from botocore.credentials import Credentials

from awsenv.ambient import AmbientConnectionManager
from awsenv.credentials import (
    CredentialIdentifier,
    CredentialProvider,
    CredentialProviderException,
    ProfileCredentialStore,
)
from awsenv.options import InjectionOptions
from awsenv.regions import Region, StaticRegionCatalog
from awsenv.resolver import ConnectionResolver, CredentialNotFound

US_EAST_1 = Region("us-east-1", "US East (N. Virginia)", "aws")


@pytest.fixture
def session_factory(mocker):
    factory = mocker.MagicMock()
    factory.return_value.available_profiles = ["prod", "default"]
    factory.return_value.get_credentials.return_value = Credentials(
        "AKIAEXAMPLE", "secret", "token"
    )
    return factory


@pytest.fixture
def store(session_factory):
    return ProfileCredentialStore(session_factory)


def test_identifiers(store):
    assert list(store.identifiers()) == ["profile:default", "profile:prod"]
    assert store.identifier_by_id("profile:prod") == CredentialIdentifier(
        "profile:prod", "Profile: prod"
    )


@pytest.mark.parametrize("credential_id", [None, "", "profile:missing", "prod"])
def test_unknown_identifier(store, credential_id):
    assert store.identifier_by_id(credential_id) is None


def test_credential_provider(store, session_factory):
    identifier = store.identifier_by_id("profile:prod")
    provider = store.credential_provider(identifier, US_EAST_1)

    session_factory.assert_called_with(profile_name="prod", region_name="us-east-1")
    assert provider.id == "profile:prod"
    creds = provider.resolve_credentials()
    assert (creds.access_key, creds.secret_key, creds.token) == (
        "AKIAEXAMPLE",
        "secret",
        "token",
    )


def test_vanished_profile(store, session_factory):
    identifier = store.identifier_by_id("profile:prod")
    session_factory.side_effect = botocore.exceptions.ProfileNotFound(profile="prod")
    with pytest.raises(CredentialProviderException):
        store.credential_provider(identifier, US_EAST_1)


def test_profile_without_credentials(store, session_factory):
    identifier = store.identifier_by_id("profile:prod")
    session_factory.return_value.get_credentials.return_value = None
    with pytest.raises(CredentialProviderException):
        store.credential_provider(identifier, US_EAST_1)


def test_non_profile_identifier(store):
    with pytest.raises(CredentialProviderException):
        store.credential_provider(CredentialIdentifier("sso:x", "x"), US_EAST_1)


def test_provider_wraps_botocore_errors(mocker):
    session = mocker.MagicMock()
    session.get_credentials.side_effect = botocore.exceptions.NoCredentialsError()
    provider = CredentialProvider(CredentialIdentifier("profile:a", "a"), session)
    with pytest.raises(CredentialProviderException):
        provider.resolve_credentials()


def access_denied():
    return botocore.exceptions.ClientError(
        {"Error": {"Code": "AccessDenied", "Message": "denied"}}, "AssumeRole"
    )


def test_provider_wraps_client_errors(mocker):
    session = mocker.MagicMock()
    session.get_credentials.return_value.get_frozen_credentials.side_effect = (
        access_denied()
    )
    provider = CredentialProvider(CredentialIdentifier("profile:a", "a"), session)
    with pytest.raises(CredentialProviderException, match="AccessDenied"):
        provider.resolve_credentials()


def test_denied_role_is_credential_not_found(mocker, store, session_factory):
    creds = mocker.MagicMock()
    creds.get_frozen_credentials.side_effect = access_denied()
    session_factory.return_value.get_credentials.return_value = creds

    resolver = ConnectionResolver(
        store,
        StaticRegionCatalog([US_EAST_1]),
        AmbientConnectionManager(store, StaticRegionCatalog([US_EAST_1])),
    )
    with pytest.raises(CredentialNotFound):
        resolver.resolve(InjectionOptions(region="us-east-1", credential="profile:prod"))
