#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Look up AWS regions by region code.

A `RegionCatalog` maps region codes such as "us-east-1" to `Region`
descriptors. awsenv never constructs regions itself, it only looks them up.
The included `BotocoreRegionCatalog` uses the endpoint metadata that ships with
botocore, so no network calls are made:

    catalog = BotocoreRegionCatalog()
    catalog.lookup('us-east-1')
    Region(id='us-east-1', name='US East (N. Virginia)', partition='aws')
"""

import logging
from collections import namedtuple

import botocore.session

LOG = logging.getLogger(__name__)


Region = namedtuple("Region", ["id", "name", "partition"])
Region.__doc__ = """An AWS region: its code, display name, and partition."""


class RegionCatalog:
    """Abstract base class for region lookups.

    Subclasses must implement `regions`. The default `lookup` is a dict lookup
    into its result.
    """

    def regions(self):
        """Returns a dict of region code to `Region` for all known regions."""
        raise NotImplementedError

    def lookup(self, code):
        """Returns the `Region` for `code` or `None` if it is not known."""
        if not code:
            return None
        return self.regions().get(code)


class BotocoreRegionCatalog(RegionCatalog):
    """A region catalog backed by the endpoint data bundled with botocore.

    The `endpoints` argument is the raw endpoint document. It is loaded lazily
    from botocore when not provided.
    """

    def __init__(self, endpoints=None):
        self._endpoints = endpoints
        self._regions = None

    def regions(self):
        if self._regions is None:
            if self._endpoints is None:
                self._endpoints = botocore.session.get_session().get_data("endpoints")
            self._regions = _parse_endpoints(self._endpoints)
            LOG.debug("loaded %d regions from endpoint data", len(self._regions))
        return self._regions


class StaticRegionCatalog(RegionCatalog):
    """A region catalog over a fixed iterable of `Region` objects."""

    def __init__(self, regions):
        self._regions = {r.id: r for r in regions}

    def regions(self):
        return dict(self._regions)


def _parse_endpoints(endpoints):
    regions = {}
    for partition in endpoints.get("partitions", []):
        partition_id = partition.get("partition", "aws")
        for code, info in partition.get("regions", {}).items():
            regions[code] = Region(code, info.get("description", code), partition_id)
    return regions
