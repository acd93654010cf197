#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Injection options for a launch configuration and their XML persistence.

## Overview

`InjectionOptions` records the user's choice for one launch configuration:
either follow the current connection (`use_current_connection`), or use an
explicit `region` and `credential` identifier. The explicit fields may be
`None` while the user is still editing; that is only an error when the options
are resolved.

## Persistence

The options are persisted as a single element nested under the launch
configuration's own element. Only that element is owned by this module, so it
can live inside any host document:

    <configuration name="deploy">
      <command>...</command>
      <awsConnection useCurrentConnection="false" region="us-east-1"
                     credential="profile:default" />
    </configuration>

`None` fields are omitted. When reading, missing or malformed attributes fall
back to the field defaults, so records written by older or newer versions
always load. `deserialize(serialize(x)) == x` holds for all options.
"""

import logging
import xml.etree.ElementTree as ET

LOG = logging.getLogger(__name__)

ELEMENT_TAG = "awsConnection"
USE_CURRENT_CONNECTION = "useCurrentConnection"
REGION = "region"
CREDENTIAL = "credential"

_TRUE = "true"
_FALSE = "false"


class InjectionOptions:
    """The connection choice of a single launch configuration.

    By default, the current connection is not used and no region or credential
    is selected.
    """

    def __init__(self, use_current_connection=False, region=None, credential=None):
        self.use_current_connection = use_current_connection
        self.region = region
        self.credential = credential

    def copy(self):
        return InjectionOptions(self.use_current_connection, self.region, self.credential)

    def __eq__(self, other):
        if not isinstance(other, InjectionOptions):
            return NotImplemented
        return (
            self.use_current_connection == other.use_current_connection
            and self.region == other.region
            and self.credential == other.credential
        )

    def __repr__(self):
        return (
            f"InjectionOptions(use_current_connection={self.use_current_connection!r}, "
            f"region={self.region!r}, credential={self.credential!r})"
        )


def serialize(options):
    """Returns a new `awsConnection` element representing `options`."""
    element = ET.Element(ELEMENT_TAG)
    element.set(USE_CURRENT_CONNECTION, _TRUE if options.use_current_connection else _FALSE)
    if options.region is not None:
        element.set(REGION, options.region)
    if options.credential is not None:
        element.set(CREDENTIAL, options.credential)
    return element


def deserialize(element):
    """Returns the `InjectionOptions` stored in `element`.

    A `None` element, or any missing or unparseable attribute, yields the
    default for that field. This function does not raise on bad input.
    """
    options = InjectionOptions()
    if element is None:
        return options

    flag = element.get(USE_CURRENT_CONNECTION)
    if flag is not None:
        flag = flag.strip().lower()
        if flag in (_TRUE, _FALSE):
            options.use_current_connection = flag == _TRUE
        else:
            LOG.warning("ignoring invalid %s value: %r", USE_CURRENT_CONNECTION, flag)

    options.region = element.get(REGION)
    options.credential = element.get(CREDENTIAL)
    return options


def write_into(parent, options):
    """Replaces the `awsConnection` child of `parent` with `options`.

    If `options` is `None`, any existing child is removed.
    """
    for child in parent.findall(ELEMENT_TAG):
        parent.remove(child)
    if options is not None:
        parent.append(serialize(options))


def read_from(parent):
    """Returns the options stored under `parent` or `None` if there are none."""
    element = parent.find(ELEMENT_TAG)
    if element is None:
        return None
    return deserialize(element)
