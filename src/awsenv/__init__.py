#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Library and CLI to inject AWS connection credentials into launched processes.

## Overview

`awsenv` decides, for a single launch of an external process, which AWS
credential and region (together, a "connection") should be active, and exposes
that connection to the spawned process as the standard AWS environment
variables. A launch configuration can either follow the "current" connection,
which is a process-wide selection made by the user, or pin an explicit region
and credential. That choice is persisted alongside the rest of the launch
configuration as XML, and every injection attempt emits exactly one telemetry
event describing whether it succeeded.

### CLI Usage

The awsenv CLI command is documented on the `awsenv.cli` page. It launches a
command with the resolved connection injected into its environment and can
save and reload launch configurations:

    $ awsenv --region us-east-1 --credential profile:default -- aws s3 ls
    $ awsenv --use-current --run-config build.xml --save -- make deploy
    $ awsenv --run-config build.xml

### Library Usage

The CLI is a thin wrapper. The pieces of interest to library users are:

`awsenv.extension`
: The `awsenv.extension.AwsConnectionExtension` orchestrates a single
injection attempt: applicability check, resolution, injection, and telemetry.

`awsenv.resolver`
: The `awsenv.resolver.ConnectionResolver` turns an
`awsenv.options.InjectionOptions` into an `awsenv.connection.ConnectionSettings`
or raises one of the typed resolution exceptions.

`awsenv.options`
: The injection options record and its XML persistence codec.

`awsenv.runconfig`
: A minimal launch configuration that owns its injection options and can be
saved to and loaded from disk.

A typical library user wires the collaborators together once:

    store = ProfileCredentialStore()
    catalog = BotocoreRegionCatalog()
    ambient = AmbientConnectionManager(store, catalog)
    ambient.select('profile:default', 'us-east-1')

    extension = AwsConnectionExtension(
        ApplicabilityGate(InjectCredentials.OnlyIfConfigured),
        ConnectionResolver(store, catalog, ambient))

    env = dict(os.environ)
    extension.add_environment_variables(run_config, env)
    subprocess.run(run_config.command, env=env)

### User-Defined Plug-ins

The credential store and the telemetry sink are loaded via the plug-in manager
in `awsenv.plugmgr`, so users may provide their own implementations. See the
`awsenv.plugins` page for the plug-in specification format.
"""

name = "awsenv"
__version__ = "1.0.0"
