#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Provides additional actions and formatters for the builtin argparse module."""

import argparse


class RawAndDefaultsFormatter(
    argparse.ArgumentDefaultsHelpFormatter, argparse.RawDescriptionHelpFormatter
):
    """Mixin of ArgumentDefaultsHelpFormatter and RawDescriptionHelpFormatter.

    argparse does not combine help formatters on its own. The awsenv CLI wants
    both its raw description and the defaults of each flag.
    """


class SetKeyValuePair(argparse.Action):
    """Argparse action to collect `KEY=VALUE` options into a dict.

    Each occurrence sets one key. A later occurrence of the same key replaces
    the earlier value. The value may be empty or contain `=`:

        >>> parser = argparse.ArgumentParser()
        >>> parser.add_argument('--env', action=SetKeyValuePair, default={})
        >>> parser.parse_args('--env STAGE=prod --env OPTS=a=b --env EMPTY='.split()).env
        {'STAGE': 'prod', 'OPTS': 'a=b', 'EMPTY': ''}

    The default dict is never modified.
    """

    def __call__(self, parser, namespace, values, option_string=None):
        key, sep, value = values.partition("=")
        if not sep or not key:
            parser.error(f"{option_string}: expected KEY=VALUE")

        current = getattr(namespace, self.dest)
        d = {} if current is None else dict(current)
        d[key] = value
        setattr(namespace, self.dest, d)
