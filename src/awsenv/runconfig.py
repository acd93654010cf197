#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""A launch configuration for an external process.

A `RunConfiguration` describes one process to launch: a name, the command line,
extra environment variables, and, optionally, the `awsenv.options.InjectionOptions`
that decide which AWS connection is injected. The options belong to the
configuration they are attached to and are saved and loaded with it:

    <?xml version='1.0' encoding='utf-8'?>
    <configuration name="deploy" kind="process" project="billing">
      <arg value="make" />
      <arg value="deploy" />
      <env name="STAGE" value="prod" />
      <awsConnection useCurrentConnection="true" />
    </configuration>

The host element and everything but the `awsConnection` element is owned by
this module. The `awsConnection` element is delegated to an
`awsenv.extension.AwsConnectionExtension`.
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

LOG = logging.getLogger(__name__)

ROOT_TAG = "configuration"


class RunConfiguration:
    """A named command line to launch with an optional AWS connection choice.

    `kind` identifies the type of launch and is used to exclude kinds of
    configurations from injection. `project` is the project context passed to
    the ambient connection provider.
    """

    def __init__(
        self,
        name,
        command,
        kind="process",
        project=None,
        environment=None,
        aws_connection=None,
    ):
        self.name = name
        self.command = list(command)
        self.kind = kind
        self.project = project
        self.environment = dict(environment) if environment else {}
        self.aws_connection = aws_connection

    def write_external(self, element, extension):
        """Writes this configuration into the attributes and children of `element`."""
        element.set("name", self.name)
        element.set("kind", self.kind)
        if self.project is not None:
            element.set("project", self.project)
        for arg in self.command:
            ET.SubElement(element, "arg", value=arg)
        for key, value in self.environment.items():
            ET.SubElement(element, "env", name=key, value=value)
        extension.write_external(self, element)

    @classmethod
    def read_external(cls, element, extension):
        """Returns a configuration read from `element`.

        Raises `ValueError` if the element has no name.
        """
        name = element.get("name")
        if not name:
            raise ValueError(f"Run configuration <{element.tag}> has no name")

        config = cls(
            name,
            [arg.get("value", "") for arg in element.findall("arg")],
            kind=element.get("kind", "process"),
            project=element.get("project"),
            environment={
                env.get("name"): env.get("value", "")
                for env in element.findall("env")
                if env.get("name")
            },
        )
        extension.read_external(config, element)
        return config

    def save(self, path, extension):
        """Saves this configuration as an XML file at `path`."""
        path = Path(path)
        root = ET.Element(ROOT_TAG)
        self.write_external(root, extension)
        ET.indent(root)
        LOG.info("saving run configuration %s to %s", self.name, path)
        ET.ElementTree(root).write(path, encoding="utf-8", xml_declaration=True)

    @classmethod
    def load(cls, path, extension):
        """Loads a configuration from the XML file at `path`."""
        LOG.info("loading run configuration from %s", path)
        return cls.read_external(ET.parse(path).getroot(), extension)

    def __repr__(self):
        return f"RunConfiguration({self.name!r}, {self.command!r}, kind={self.kind!r})"
