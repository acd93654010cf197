#
# Copyright 2019 FMR LLC <opensource@fidelity.com>
#
# SPDX-License-Identifier: MIT
#
"""Record the outcome of credential injection attempts.

## Overview

Each injection attempt produces exactly one event, reported through a
`TelemetryReporter`. The reporter builds the event and hands it to a
`TelemetrySink`, which decides where it goes. An event is a dict:

    {
        "eventName": "injectCredentials",
        "result": "Succeeded",
        "context": "python3.11",
        "createTime": "2020-06-01T12:00:00+00:00"
    }

`context` is an optional caller-supplied string describing what was launched.

Reporting is fire-and-forget. `TelemetryReporter.report` never raises; if the
sink fails, the failure is logged and dropped.

## Sinks

`LoggingSink`
:  Writes each event to the `awsenv.telemetry` logger at INFO level.

`JSONLinesSink`
:  Appends each event as a line of JSON to a file.

`NullSink`
:  Discards events.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path

LOG = logging.getLogger(__name__)

INJECT_CREDENTIALS = "injectCredentials"


class Result(Enum):
    """Outcome of an injection attempt."""

    Succeeded = "Succeeded"
    Failed = "Failed"


class TelemetryReporter:
    """Reports injection outcomes to a `TelemetrySink`."""

    def __init__(self, sink=None):
        self.sink = sink if sink is not None else LoggingSink()

    def report(self, result, context=None):
        """Reports `result` with an optional `context` string. Never raises."""
        try:
            event = {
                "eventName": INJECT_CREDENTIALS,
                "result": Result(result).value,
                "context": context,
                "createTime": datetime.now(timezone.utc).isoformat(),
            }
            self.sink.record(event)

        except Exception as e:  # pylint: disable=broad-except
            LOG.warning("failed to report telemetry: %s", e, exc_info=True)


class TelemetrySink:
    """Abstract base class for telemetry destinations."""

    def record(self, event):
        """Records `event`, a dict. May raise, the reporter handles errors."""
        raise NotImplementedError


class LoggingSink(TelemetrySink):
    """Writes events to the log."""

    def record(self, event):
        LOG.info(
            "%s: %s (context=%s)", event["eventName"], event["result"], event["context"]
        )


class JSONLinesSink(TelemetrySink):
    """Appends events to `path` as JSON lines.

    The parent directory is created on first use. This class is thread-safe.
    """

    def __init__(self, path):
        self._path = path if isinstance(path, Path) else Path(path)
        self._lock = threading.Lock()

    def record(self, event):
        with self._lock:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as out:
                out.write(json.dumps(event) + "\n")


class NullSink(TelemetrySink):
    """Discards events."""

    def record(self, event):
        pass
