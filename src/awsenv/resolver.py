#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Resolve injection options into a connection.

## Overview

`ConnectionResolver.resolve` turns an `awsenv.options.InjectionOptions` into
an `awsenv.connection.ConnectionSettings`. It branches strictly on
`use_current_connection`:

- When set, the ambient connection provider is asked for the current
  connection of the project context. Any explicit region or credential stored
  in the options is ignored.

- Otherwise the region is looked up in the region catalog first, then the
  credential identifier in the credential store, and finally a credential
  provider is materialized for that region.

The resolver holds no state between calls and performs no retries. Every
failure is raised immediately as one of the exceptions below.

## Exceptions

All exceptions derive from `ResolutionException` and describe a configuration
the user can correct.

`NoAmbientConnection`
:  Raised if the current connection is requested but none is selected.

`MissingRegion`
:  Raised if no region is set, or the region code is unknown.

`MissingCredential`
:  Raised if no credential identifier is set.

`CredentialNotFound`
:  Raised if the credential identifier is unknown or cannot be materialized.
"""

import logging

from awsenv.connection import ConnectionSettings
from awsenv.credentials import CredentialProviderException

LOG = logging.getLogger(__name__)


class ConnectionResolver:
    """Resolves injection options using external catalogs.

    `credential_store` is an `awsenv.credentials.CredentialStore`,
    `region_catalog` is an `awsenv.regions.RegionCatalog`, and
    `ambient_provider` is an `awsenv.ambient.AmbientConnectionProvider`.
    """

    def __init__(self, credential_store, region_catalog, ambient_provider):
        self._credential_store = credential_store
        self._region_catalog = region_catalog
        self._ambient_provider = ambient_provider

    def resolve(self, options, context=None):
        """Returns the `ConnectionSettings` for `options` in `context`.

        Raises a `ResolutionException` subclass if the options cannot be
        resolved. Exceptions raised by the collaborators themselves are not
        caught here.
        """
        if options.use_current_connection:
            return self._resolve_current(context)
        return self._resolve_explicit(options)

    def _resolve_current(self, context):
        connection = self._ambient_provider.current_connection(context)
        if connection is None:
            raise NoAmbientConnection(
                "No current AWS connection is selected, configure one first"
            )
        LOG.info("using current connection %s", connection)
        return connection

    def _resolve_explicit(self, options):
        region = self._region_catalog.lookup(options.region) if options.region else None
        if region is None:
            raise MissingRegion(
                f"No valid region specified: {options.region!r}"
                if options.region
                else "No region specified"
            )

        if not options.credential:
            raise MissingCredential("No AWS credential specified")

        identifier = self._credential_store.identifier_by_id(options.credential)
        if identifier is None:
            raise CredentialNotFound(f"AWS credential not found: {options.credential}")

        try:
            provider = self._credential_store.credential_provider(identifier, region)
        except CredentialProviderException as e:
            raise CredentialNotFound(
                f"AWS credential {options.credential} is not usable: {e}"
            ) from e

        connection = ConnectionSettings(provider, region)
        LOG.info("using explicit connection %s", connection)
        return connection


class ResolutionException(Exception):
    """Base class for failures to resolve injection options."""


class NoAmbientConnection(ResolutionException):
    """Raised if the current connection is requested but none is selected."""


class MissingRegion(ResolutionException):
    """Raised if the region is not set or not found in the region catalog."""


class MissingCredential(ResolutionException):
    """Raised if the credential identifier is not set."""


class CredentialNotFound(ResolutionException):
    """Raised if the credential is unknown or no provider can be materialized."""
