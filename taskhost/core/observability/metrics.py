from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

# Named counters (in-process snapshot)
_NAMED = Counter()

_PROM_RESOLUTIONS = PromCounter(
    "taskhost_builder_resolutions_total",
    "Builder specifier resolutions",
    ["source", "outcome"],
)

_PROM_LOADS = PromCounter(
    "taskhost_builder_loads_total",
    "Builder implementation loads",
    ["adapter", "outcome"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters to avoid cross-test leakage.
    Prometheus counters are process-global and are not reset.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def inc_resolution(source: str, outcome: str) -> None:
    """source: "manifest" | "direct"; outcome: "ok" or the error class name."""
    _NAMED[f"resolve_{source}_{outcome}"] += 1
    _PROM_RESOLUTIONS.labels(source=source, outcome=outcome).inc()


def inc_load(adapter: str, outcome: str) -> None:
    """adapter: "native" | "executor"; outcome: "ok" or the error class name."""
    _NAMED[f"load_{adapter}_{outcome}"] += 1
    _PROM_LOADS.labels(adapter=adapter, outcome=outcome).inc()


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)
