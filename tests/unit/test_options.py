#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#

# pylint: disable=redefined-outer-name,missing-docstring

import xml.etree.ElementTree as ET

import pytest

from awsenv import options
from awsenv.options import InjectionOptions


@pytest.mark.parametrize(
    "opts",
    [
        InjectionOptions(),
        InjectionOptions(use_current_connection=True),
        InjectionOptions(region="us-east-1", credential="profile:default"),
        InjectionOptions(region="us-east-1"),
        InjectionOptions(credential="profile:default"),
        InjectionOptions(True, "eu-west-1", "profile:stale"),
        InjectionOptions(region="", credential=""),
    ],
)
def test_round_trip(opts):
    assert options.deserialize(options.serialize(opts)) == opts


def test_round_trip_through_xml_text():
    opts = InjectionOptions(region="abc123", credential="mockCredential")
    host = ET.Element("bling")
    options.write_into(host, opts)

    reread = ET.fromstring(ET.tostring(host, encoding="unicode"))
    assert options.read_from(reread) == opts


def test_serialize_omits_null_fields():
    element = options.serialize(InjectionOptions())
    assert element.tag == "awsConnection"
    assert element.attrib == {"useCurrentConnection": "false"}


def test_missing_credential_attribute_is_none():
    element = ET.fromstring(
        '<awsConnection useCurrentConnection="false" region="us-east-1" />'
    )
    opts = options.deserialize(element)
    assert opts == InjectionOptions(region="us-east-1")
    assert opts.credential is None


@pytest.mark.parametrize(
    "xml, expected",
    [
        ("<awsConnection />", InjectionOptions()),
        ('<awsConnection useCurrentConnection="TRUE" />', InjectionOptions(True)),
        ('<awsConnection useCurrentConnection="maybe" />', InjectionOptions()),
        (
            '<awsConnection futureField="x" region="us-east-1" />',
            InjectionOptions(region="us-east-1"),
        ),
    ],
)
def test_deserialize_degrades_to_defaults(xml, expected):
    assert options.deserialize(ET.fromstring(xml)) == expected


def test_deserialize_none_element():
    assert options.deserialize(None) == InjectionOptions()


def test_read_from_host_without_options():
    assert options.read_from(ET.Element("configuration")) is None


def test_write_into_replaces_existing_and_keeps_siblings():
    host = ET.Element("configuration")
    ET.SubElement(host, "arg", value="make")
    options.write_into(host, InjectionOptions(region="us-east-1"))
    options.write_into(host, InjectionOptions(use_current_connection=True))

    assert len(host.findall("awsConnection")) == 1
    assert host.find("arg").get("value") == "make"
    assert options.read_from(host) == InjectionOptions(use_current_connection=True)


def test_write_into_none_removes_options():
    host = ET.Element("configuration")
    options.write_into(host, InjectionOptions())
    options.write_into(host, None)
    assert host.find("awsConnection") is None


def test_copy_is_independent():
    opts = InjectionOptions(region="us-east-1")
    dup = opts.copy()
    dup.region = "eu-west-1"
    assert opts.region == "us-east-1"
    assert dup != opts
