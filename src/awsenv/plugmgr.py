#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Load and instantiate awsenv plug-ins from the user configuration.

## Overview

Two behaviors of the awsenv CLI are pluggable: where credentials come from (the
`Credentials` plug-in, which builds an `awsenv.credentials.CredentialStore`)
and where telemetry goes (the `Telemetry` plug-in, which builds an
`awsenv.telemetry.TelemetrySink`). A plug-in is a subclass of `Plugin` named by
a dotted path in the user configuration:

    Telemetry:
      plugin: awsenv.plugins.telemetry.JSONLines
      options:
        path: /tmp/awsenv-telemetry.jsonl

The `PluginManager` loads the class, lets it register CLI flags on the main
argument parser, parses the flags it registered, and finally instantiates it:

    pm = PluginManager(config, parser, args, remaining_argv)
    pm.parse_args('Credentials', default='awsenv.plugins.creds.Profile')
    pm.parse_args('Telemetry', default='awsenv.plugins.telemetry.Log')

    store = pm.instantiate('Credentials', must_be=CredentialStore)
    sink = pm.instantiate('Telemetry', must_be=TelemetrySink)

Parsing and instantiation are separate steps so that all command line errors
are reported before any plug-in does real work. `PluginManager.instantiate`
parses the arguments itself if `PluginManager.parse_args` was not called.
"""
import importlib
import logging
from functools import partial, reduce
from inspect import isclass

LOG = logging.getLogger(__name__)


class Plugin:
    """Abstract base class for plug-ins.

    The constructor receives the main CLI `parser`, an
    `argparse.ArgumentParser`, and `cfg`, a callable with the
    `awsenv.config.Config.get` interface rooted at the plug-in's `options`
    block. Subclasses register their flags in the constructor, prefixed to
    avoid collisions with the main CLI, and use `cfg` for their defaults:

        def __init__(self, parser, cfg):
            super().__init__(parser, cfg)
            group = parser.add_argument_group('telemetry options')
            group.add_argument(
                '--telemetry-path',
                metavar='FILE',
                default=cfg('path', type=Str),
                help='file to append telemetry events to')

    Plug-ins must not call `parse_args` on the parser themselves.
    """

    def __init__(self, parser, cfg):
        self.parser = parser
        self.cfg = cfg

    def instantiate(self, args):
        """Returns the object built by this plug-in.

        `args` is the `argparse.Namespace` containing the parsed flags. Use
        `self.parser.error` to abort with a message to the user.
        """
        raise NotImplementedError


class PluginManager:
    """Manages the loading of plug-ins and the CLI arguments they register.

    `config` is the `awsenv.config.Config` holding the plug-in specifications,
    `parser` the main `argparse.ArgumentParser`, `parsed_args` the namespace
    from parsing the main CLI flags, and `unparsed_argv` the arguments the main
    CLI did not recognize.
    """

    def __init__(self, config, parser, parsed_args, unparsed_argv):
        self._config = config
        self._parser = parser
        self._plugins = {}

        self.args = parsed_args
        """The `argparse.Namespace` that plug-in arguments are parsed into."""

        self.remaining_argv = unparsed_argv
        """Arguments not yet consumed by the main CLI or any loaded plug-in."""

    def parse_args(self, *keys, default=None):
        """Loads the plug-in at config path `keys` and parses its arguments.

        If the configuration has no `plugin` under `keys`, the dotted path in
        `default` is used instead. Raises `ValueError` if the plug-in cannot be
        imported and `TypeError` if it is not a `Plugin`.
        """
        path = self._config.get(*keys, "plugin") or default
        LOG.info("loading plug-in: %s", path)

        try:
            plugin_class = load_dotted_object(path)
        except ImportError as e:
            raise ValueError(f"Error in config: {'->'.join(keys)}->plugin: {e}") from e

        if not (isclass(plugin_class) and issubclass(plugin_class, Plugin)):
            raise TypeError(
                f"Error in config: {'->'.join(keys)}->plugin: '{path}' is not a {Plugin}"
            )

        plugin = plugin_class(self._parser, partial(self._config.get, *keys, "options"))
        self.args, self.remaining_argv = self._parser.parse_known_args(
            self.remaining_argv, self.args
        )
        LOG.info("parsed args=%s remaining args=%s", self.args, self.remaining_argv)

        self._plugins[keys] = plugin

    def instantiate(self, *keys, default=None, must_be=None):
        """Returns the object built by the plug-in at config path `keys`.

        If `must_be` is given, the object must be an instance of it or a
        `TypeError` is raised.
        """
        if keys not in self._plugins:
            self.parse_args(*keys, default=default)

        instance = self._plugins[keys].instantiate(self.args)

        if must_be and not isinstance(instance, must_be):
            raise TypeError(
                f"Error in config: {'->'.join(keys)}->plugin: plugin did not build a {must_be}"
            )

        return instance


def load_dotted_object(dotted_name):
    """Returns the object at `dotted_name`, such as `some.module.SomeClass`.

    The longest importable module prefix is imported and the remaining names
    are looked up as attributes. Raises `ImportError` if that fails.
    """
    mod_name, attributes = dotted_name or "", []

    while mod_name:
        try:
            mod = importlib.import_module(mod_name)
        except ModuleNotFoundError:
            mod_name, _, attr = mod_name.rpartition(".")
            attributes.insert(0, attr)
            continue

        obj = reduce(lambda a, p: getattr(a, p, None), attributes, mod)
        if obj is None:
            raise ImportError(
                f"module '{mod_name}' does not contain '{'.'.join(attributes)}'"
            )
        return obj

    raise ImportError(f"cannot import '{dotted_name}'")
