#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides the "current" AWS connection selected by the user.

## Overview

Besides pinning a credential and region in each launch configuration, a user
can select a connection once and have every launch configuration follow it.
This ambient selection is exposed through the `AmbientConnectionProvider`
interface, which returns an `awsenv.connection.ConnectionSettings` for a
project context or `None` if nothing usable is selected.

`AmbientConnectionManager` keeps a default selection plus optional selections
per project context. The selection is stored as identifiers, and a fresh
`ConnectionSettings` is materialized on every call. It can be configured from
the `Connection` block of the user configuration:

    Connection:
      credential: profile:default
      region: us-east-1
      projects:
        billing:
          credential: profile:billing
          region: eu-west-1

With the above, the context "billing" resolves to the billing profile in
eu-west-1 while every other context uses the default profile in us-east-1.
"""

import logging

from awsenv.config import Dict, RegionCode, Str
from awsenv.connection import ConnectionSettings
from awsenv.credentials import CredentialProviderException

LOG = logging.getLogger(__name__)


class AmbientConnectionProvider:
    """Abstract base class for providers of the current connection."""

    def current_connection(self, context=None):
        """Returns the `ConnectionSettings` selected for `context` or `None`.

        `context` is an opaque project context, typically a project name. A
        provider must not raise when nothing is selected.
        """
        raise NotImplementedError


class AmbientConnectionManager(AmbientConnectionProvider):
    """Holds the user's current connection selection.

    `credential_store` is an `awsenv.credentials.CredentialStore` and
    `region_catalog` an `awsenv.regions.RegionCatalog`, used to materialize the
    selected identifiers. `credential` and `region` are the initial default
    selection.
    """

    def __init__(self, credential_store, region_catalog, credential=None, region=None):
        self._credential_store = credential_store
        self._region_catalog = region_catalog
        self._default = (credential, region)
        self._projects = {}

    @classmethod
    def from_config(cls, cfg, credential_store, region_catalog):
        """Returns a manager configured from the `Connection` block of `cfg`.

        `cfg` is a callable with the `awsenv.config.Config.get` interface that
        is rooted at the `Connection` block.
        """
        manager = cls(
            credential_store,
            region_catalog,
            credential=cfg("credential", type=Str),
            region=cfg("region", type=RegionCode),
        )
        projects = cfg("projects", type=Dict(Str, Dict(Str, Str)), default={})
        for context, selection in projects.items():
            manager.select(selection.get("credential"), selection.get("region"), context)
        return manager

    def select(self, credential, region, context=None):
        """Selects `credential` and `region` for `context`, or the default if `None`."""
        LOG.info("selected %s in %s for context %s", credential, region, context)
        if context is None:
            self._default = (credential, region)
        else:
            self._projects[context] = (credential, region)

    def selection(self, context=None):
        """Returns the (credential id, region code) tuple in effect for `context`."""
        return self._projects.get(context, self._default)

    def current_connection(self, context=None):
        credential_id, region_code = self.selection(context)
        if not credential_id or not region_code:
            LOG.info("no current connection selected for context %s", context)
            return None

        region = self._region_catalog.lookup(region_code)
        identifier = self._credential_store.identifier_by_id(credential_id)
        if region is None or identifier is None:
            LOG.warning(
                "current connection %s in %s is not valid", credential_id, region_code
            )
            return None

        try:
            provider = self._credential_store.credential_provider(identifier, region)
        except CredentialProviderException as e:
            LOG.warning("current connection %s is not usable: %s", credential_id, e)
            return None

        return ConnectionSettings(provider, region)
