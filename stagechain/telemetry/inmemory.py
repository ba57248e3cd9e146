"""In-memory telemetry backend for tests and local runs."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass, field

from stagechain.telemetry.base import Labels


@dataclass
class InMemoryTelemetry:
    """Keeps every counter and timing in memory for later inspection."""

    counters: dict[str, Counter] = field(default_factory=lambda: defaultdict(Counter))
    timings: dict[str, list[float]] = field(default_factory=lambda: defaultdict(list))

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        key = self._make_key(name, labels)
        self.counters[key][name] += value

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        key = self._make_key(name, labels)
        self.timings[key].append(value)

    def _make_key(self, name: str, labels: Labels | None) -> str:
        if not labels:
            return name
        label_str = ",".join(f"{k}={v}" for k, v in labels)
        return f"{name}{{{label_str}}}"

    # ── Test helpers ─────────────────────────────────────────────────────

    def get_counter(self, name: str, labels: Labels = ()) -> int:
        key = self._make_key(name, labels)
        return int(self.counters[key][name])

    def get_timing_values(self, name: str, labels: Labels = ()) -> list[float]:
        key = self._make_key(name, labels)
        return list(self.timings[key])

    def reset(self) -> None:
        """Clear all metrics."""
        self.counters.clear()
        self.timings.clear()
