#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Reads the awsenv user configuration with type-checked values.

## Overview

`Config` wraps a (possibly nested) dict loaded from a YAML or JSON file and
offers `Config.get` to read values with defaults, mandatory checks, and type
checks. Parsers are registered by file extension, so `Config.from_file` picks
`YAMLConfig` for `.yaml`/`.yml` files and `JSONConfig` for `.json` files.

## The User Configuration

The CLI reads `~/.awsenv.yaml` unless the `AWSENV_CONFIG` environment variable
points elsewhere. A complete example:

    Settings:
      inject_credentials: OnlyIfConfigured

    Connection:
      credential: profile:default
      region: us-east-1
      projects:
        billing:
          credential: profile:billing
          region: eu-west-1

    CLI:
      log_level: INFO

    Credentials:
      plugin: awsenv.plugins.creds.Profile

    Telemetry:
      plugin: awsenv.plugins.telemetry.JSONLines
      options:
        path: /tmp/awsenv-telemetry.jsonl

## Type Checking

Types are objects, not Python classes. The singletons `Str`, `Int`, `Bool`,
`Any`, and `Dotted` cover the simple cases, while `StrMatch`, `Choice`,
`List`, and `Dict` build compound types. `Not` and `Or` combine them:

    c = Config.from_file('~/.awsenv.yaml')
    c.get('Settings', 'inject_credentials',
          type=Choice('Always', 'Never', 'OnlyIfConfigured'),
          default='OnlyIfConfigured')
    c.get('Connection', 'projects', type=Dict(Str, Dict(Str, Str)), default={})

A value that does not match its type raises `TypeError`.
"""

import json
import logging
import re
from functools import reduce
from pathlib import Path

import yaml

LOG = logging.getLogger(__name__)

# pylint: disable=unidiomatic-typecheck
#
# isinstance(True, int) is true, so exact type() comparisons are used below.


class Config:
    """A `Config` reads type-checked values from a Python dictionary.

    Subclasses parse a specific file format and register themselves via
    `Config.register_filetype`.
    """

    _filetypes = {}

    @classmethod
    def register_filetype(cls, config_class, *extensions):
        """Register `config_class` as the parser for the given '.ext' extensions."""
        for ext in extensions:
            cls._filetypes[ext] = config_class

    @classmethod
    def from_file(cls, filename, must_exist=False):
        """Factory method to load a `Config` from `filename`.

        The parser is selected by file extension. A missing file yields an
        empty `Config` unless `must_exist` is true, in which case a
        `FileNotFoundError` is raised.
        """
        path = Path(filename).expanduser()

        if not path.is_file():
            if must_exist:
                raise FileNotFoundError(f"Config file not found: {filename}")
            LOG.info("no config file at %s, using an empty config", path)
            return Config({})

        if path.suffix not in cls._filetypes:
            raise ValueError(f"Unregistered file type extension: {path.suffix}")

        LOG.info("loading config from %s", path)
        with path.open(encoding="utf-8") as f:
            return cls._filetypes[path.suffix](f)

    def __init__(self, d):
        # An empty YAML document parses to None.
        self.conf = d if d is not None else {}

    def get(self, *keys, default=None, type=None, must_exist=False):
        """Return the value found by following `keys` into the configuration.

        If no value exists at that path, `default` is returned, or a
        `ValueError` is raised when `must_exist` is set. When `type` is given,
        the value must type check or a `TypeError` is raised:

            c.get('Connection', 'region', type=Str)
            c.get('Connection', 'projects', type=Dict(Str, Dict(Str, Str)))
            c.get('Settings', 'inject_credentials', type=Choice('Always', 'Never'))
        """
        # pylint: disable=redefined-builtin
        try:
            value = reduce(lambda a, p: a.get(p, {}), keys, self.conf)
        except AttributeError as e:
            raise ValueError(
                f"Error in config: {'->'.join(keys[:-1])}: not a dictionary"
            ) from e

        # An empty dict means one of the keys was missing.
        if value == {}:
            if must_exist:
                raise ValueError(f"Error in config: {'->'.join(keys)}: must be set")
            value = default

        if value is None or not type:
            return value

        if type.type_check(value):
            return value

        raise TypeError(
            f"Error in config: {'->'.join(keys)}: not a {type}: {repr(value)}"
        )


EmptyConfig = Config({})
"""Singleton representing an empty `Config`."""


class YAMLConfig(Config):
    """Loads a YAML configuration from a stream."""

    def __init__(self, stream):
        super().__init__(yaml.safe_load(stream))


class JSONConfig(Config):
    """Loads a JSON configuration from a stream."""

    def __init__(self, stream):
        super().__init__(json.load(stream))


Config.register_filetype(JSONConfig, ".json")
Config.register_filetype(YAMLConfig, ".yaml", ".yml")


class Type:
    """Represents a type that can be used in type-check comparisons."""

    def type_check(self, obj):
        """Returns true if obj is a type matching this `Type`."""
        raise NotImplementedError

    def __str__(self):
        raise NotImplementedError


class Not(Type):
    """Matches anything `config_type` does not match."""

    def __init__(self, config_type):
        self.config_type = config_type

    def type_check(self, obj):
        return not self.config_type.type_check(obj)

    def __str__(self):
        return "not " + str(self.config_type)


class Or(Type):
    """Matches if any of `config_types` matches."""

    def __init__(self, *config_types):
        self.config_types = config_types

    def type_check(self, obj):
        return any(t.type_check(obj) for t in self.config_types)

    def __str__(self):
        return "(" + " or ".join(str(t) for t in self.config_types) + ")"


class Const(Type):
    """Matches a single constant value of the same exact type."""

    def __init__(self, const):
        self.const = const

    def type_check(self, obj):
        # True == 1, so the types must match before comparing values.
        if type(obj) != type(self.const):  # noqa: E721
            return False
        return obj == self.const

    def __str__(self):
        return f"constant '{self.const}'"


class Choice(Or):
    """Matches one of several constants, e.g. `Choice('Always', 'Never')`."""

    def __init__(self, *constants):
        super().__init__(*[Const(c) for c in constants])


class Scalar(Type):
    """Matches a builtin scalar such as `str`, `int`, or `bool` exactly."""

    def __init__(self, type_):
        self.type = type_

    def type_check(self, obj):
        return type(obj) == self.type  # noqa: E721

    def __str__(self):
        return self.type.__name__


class StrMatch(Type):
    """Matches a string against `pattern` using `re.search`."""

    def __init__(self, pattern):
        self.pattern = pattern

    def type_check(self, obj):
        if type(obj) != str:  # noqa: E721
            return False
        return bool(re.search(self.pattern, obj))

    def __str__(self):
        return f"str matching '{self.pattern}'"


class AnyType(Type):
    """Matches any value."""

    def type_check(self, obj):
        return True

    def __str__(self):
        return "any type"


Str = Scalar(str)
"""Singleton representing a str."""

Int = Scalar(int)
"""Singleton representing an int."""

Bool = Scalar(bool)
"""Singleton representing a bool."""

Any = AnyType()
"""Singleton representing any type."""

Dotted = StrMatch(r"^[^.]+(\.[^.]+)*$")
"""Singleton representing a dotted Python path."""

RegionCode = StrMatch(r"^[a-z]{2}(-[a-z]+)+-\d+$")
"""Singleton representing an AWS region code such as us-east-1."""


class List(Type):
    """Matches a list whose elements all match `element_type`."""

    def __init__(self, element_type):
        self.element_type = element_type

    def type_check(self, obj):
        if type(obj) != list:  # noqa: E721
            return False
        return all(self.element_type.type_check(e) for e in obj)

    def __str__(self):
        return f"list of {self.element_type}"


class Dict(Type):
    """Matches a dict with `key_type` keys and `value_type` values."""

    def __init__(self, key_type, value_type):
        self.key_type = key_type
        self.value_type = value_type

    def type_check(self, obj):
        if type(obj) != dict:  # noqa: E721
            return False
        return all(self.key_type.type_check(k) for k in obj.keys()) and all(
            self.value_type.type_check(v) for v in obj.values()
        )

    def __str__(self):
        return f"dict with {self.key_type} keys and {self.value_type} values"
