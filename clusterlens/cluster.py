"""An in-memory view of cluster objects, held as manifest dictionaries."""

from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

CLUSTER_SCOPED_KINDS = frozenset(
    {
        "Node",
        "Namespace",
        "PersistentVolume",
        "StorageClass",
        "IngressClass",
        "MutatingWebhookConfiguration",
        "ValidatingWebhookConfiguration",
    }
)


class NotFoundError(LookupError):
    """Raised when a requested object does not exist."""

    def __init__(self, kind: str, name: str, namespace: str = "") -> None:
        self.kind = kind
        self.name = name
        self.namespace = namespace
        super().__init__(f'{kind} "{name}" not found')


def format_label_selector(labels: Mapping[str, str]) -> str:
    """Render match labels as a selector string, sorted by key."""
    text = ",".join(f"{k}={labels[k]}" for k in sorted(labels))
    return text or "<none>"


def parse_label_selector(selector: str) -> list[tuple[str, str, str | None]]:
    """Parse a selector into (key, operator, value) requirements."""
    requirements: list[tuple[str, str, str | None]] = []
    if not selector.strip():
        return requirements
    for term in selector.split(","):
        term = term.strip()
        for op in ("!=", "==", "="):
            if op in term:
                key, value = term.split(op, 1)
                key, value = key.strip(), value.strip()
                requirements.append((key, "!=" if op == "!=" else "=", value))
                break
        else:
            if term.startswith("!"):
                key, op_name = term[1:].strip(), "!exists"
            else:
                key, op_name = term, "exists"
            if not key or not _valid_key(key):
                raise ValueError(f"invalid label selector term: {term!r}")
            requirements.append((key, op_name, None))
            continue
        if not key or not _valid_key(key):
            raise ValueError(f"invalid label selector term: {term!r}")
    return requirements


def _valid_key(key: str) -> bool:
    return all(c.isalnum() or c in "-_./" for c in key)


def labels_match(selector: str, labels: Mapping[str, str] | None) -> bool:
    """Tell whether labels satisfy a selector string."""
    labels = labels or {}
    for key, op, value in parse_label_selector(selector):
        if op == "=" and labels.get(key) != value:
            return False
        if op == "!=" and labels.get(key) == value:
            return False
        if op == "exists" and key not in labels:
            return False
        if op == "!exists" and key in labels:
            return False
    return True


def _field_value(obj: Mapping[str, Any], path: str) -> str:
    current: Any = obj
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return ""
        current = current[part]
    return "" if current is None else str(current)


def _field_match(selector: str, obj: Mapping[str, Any]) -> bool:
    for term in filter(None, (t.strip() for t in selector.split(","))):
        if "!=" in term:
            path, value = term.split("!=", 1)
            if _field_value(obj, path.strip()) == value.strip():
                return False
            continue
        if "==" in term:
            path, value = term.split("==", 1)
        elif "=" in term:
            path, value = term.split("=", 1)
        else:
            raise ValueError(f"invalid field selector term: {term!r}")
        if _field_value(obj, path.strip()) != value.strip():
            return False
    return True


def _meta(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    return obj.get("metadata") or {}


class Cluster:
    """A store of cluster objects that answers list and get queries."""

    def __init__(self, objects: Iterable[Mapping[str, Any]] = ()) -> None:
        self._objects: list[dict[str, Any]] = []
        for obj in objects:
            self.add(obj)

    def add(self, obj: Mapping[str, Any]) -> None:
        """Add an object; it needs a kind and a metadata name."""
        if not obj.get("kind") or not _meta(obj).get("name"):
            raise ValueError("object needs a kind and a metadata.name")
        self._objects.append(copy.deepcopy(dict(obj)))

    def list(
        self,
        kind: str,
        namespace: str = "",
        label_selector: str | None = None,
        field_selector: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return objects of a kind, optionally narrowed by namespace and selectors."""
        found = []
        for obj in self._objects:
            if obj["kind"] != kind:
                continue
            meta = _meta(obj)
            if namespace and kind not in CLUSTER_SCOPED_KINDS:
                if meta.get("namespace", "") != namespace:
                    continue
            if label_selector is not None and not labels_match(
                label_selector, meta.get("labels")
            ):
                continue
            if field_selector is not None and not _field_match(field_selector, obj):
                continue
            found.append(obj)
        return found

    def get(self, kind: str, name: str, namespace: str = "") -> dict[str, Any]:
        """Return one object, or raise NotFoundError."""
        scoped = kind not in CLUSTER_SCOPED_KINDS
        for obj in self._objects:
            meta = _meta(obj)
            if obj["kind"] != kind or meta.get("name") != name:
                continue
            if scoped and meta.get("namespace", "") != namespace:
                continue
            return obj
        raise NotFoundError(kind, name, namespace)