"""A labelled gauge family for counting analyzer errors."""

from __future__ import annotations

import threading
from collections.abc import Mapping, Sequence


class GaugeVec:
    """Gauges keyed by a fixed set of label names."""

    def __init__(self, name: str, help_text: str, label_names: Sequence[str]) -> None:
        self.name = name
        self.help_text = help_text
        self.label_names = tuple(label_names)
        self._values: dict[tuple[str, ...], float] = {}
        self._lock = threading.Lock()

    def _key(self, values: Sequence[str]) -> tuple[str, ...]:
        key = tuple(values)
        if len(key) != len(self.label_names):
            raise ValueError(
                f"expected {len(self.label_names)} label values, got {len(key)}"
            )
        return key

    def set(self, labels: Sequence[str], value: float) -> None:
        """Set the gauge for the given label values."""
        key = self._key(labels)
        with self._lock:
            self._values[key] = float(value)

    def get(self, *args: str) -> float:
        """Return the gauge for the given label values; KeyError if unset."""
        key = self._key(args)
        with self._lock:
            return self._values[key]

    def delete_partial_match(self, match: Mapping[str, str]) -> int:
        """Remove every gauge whose labels include the given pairs; return the count."""
        if any(name not in self.label_names for name in match):
            return 0
        positions = [(self.label_names.index(n), v) for n, v in match.items()]
        with self._lock:
            doomed = [k for k in self._values if all(k[i] == v for i, v in positions)]
            for key in doomed:
                del self._values[key]
        return len(doomed)

    def samples(self) -> list[tuple[dict[str, str], float]]:
        """Return every gauge as a label mapping and its value."""
        with self._lock:
            return [
                (dict(zip(self.label_names, key)), value)
                for key, value in self._values.items()
            ]


ANALYZER_ERRORS = GaugeVec(
    "analyzer_errors",
    "Number of errors detected by analyzer",
    ["analyzer_name", "object_name", "namespace"],
)