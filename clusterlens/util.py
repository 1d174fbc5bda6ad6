"""Small helpers used across the analyzers."""

from __future__ import annotations

import base64
import hashlib
import os
import re
import secrets
from collections.abc import Iterable, Mapping
from typing import Any

from clusterlens.cluster import Cluster, NotFoundError, format_label_selector

_ANONYMIZE_PATTERN = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "!@#$%^&*()-_=+[]{}|;':\",./<>?"
)

_PARENT_LABELS = {
    "ReplicaSet": "ReplicaSet",
    "Deployment": "Deployment",
    "StatefulSet": "StatefulSet",
    "DaemonSet": "DaemonSet",
    "Ingress": "Ingress",
    "MutatingWebhookConfiguration": "MutatingWebhook",
    "ValidatingWebhookConfiguration": "ValidatingWebhook",
}


def remove_duplicates(values: Iterable[str]) -> tuple[list[str], list[str]]:
    """Split values into the unique ones and the repeats."""
    seen: dict[str, None] = {}
    duplicates = []
    for value in values:
        if value in seen:
            duplicates.append(value)
        else:
            seen[value] = None
    return list(seen), duplicates


def slice_diff(source: Iterable[str], dest: Iterable[str]) -> list[str]:
    """Return the items of source that are not in dest."""
    excluded = set(dest)
    return [x for x in source if x not in excluded]


def mask_string(text: str) -> str:
    """Replace text with random characters of the same byte length, base64 encoded."""
    size = len(text.encode())
    masked = "".join(
        _ANONYMIZE_PATTERN[b % len(_ANONYMIZE_PATTERN)] for b in secrets.token_bytes(size)
    )
    return base64.b64encode(masked.encode()).decode()


def replace_if_match(text: str, pattern: str, replacement: str) -> str:
    """Replace every match of pattern that ends on a word boundary."""
    regex = re.compile(rf"{pattern}(\b)")
    return regex.sub(lambda _m: replacement, text)


def get_cache_key(provider: str, language: str, encoded: str) -> str:
    """Return the hex SHA-256 of the joined arguments."""
    return hashlib.sha256(f"{provider}-{language}-{encoded}".encode()).hexdigest()


def get_parent(cluster: Cluster, meta: Mapping[str, Any]) -> str:
    """Follow owner references up to the topmost known owner."""
    owners = meta.get("ownerReferences")
    if owners is not None:
        namespace = meta.get("namespace", "")
        for owner in owners:
            kind = owner.get("kind", "")
            if kind not in _PARENT_LABELS:
                continue
            try:
                parent = cluster.get(kind, owner.get("name", ""), namespace)
            except NotFoundError:
                return ""
            parent_meta = parent.get("metadata") or {}
            if parent_meta.get("ownerReferences") is not None:
                return get_parent(cluster, parent_meta)
            return f"{_PARENT_LABELS[kind]}/{parent_meta.get('name', '')}"
    return meta.get("name", "")


def get_pod_list_by_labels(
    cluster: Cluster, namespace: str, labels: Mapping[str, str]
) -> list[dict[str, Any]]:
    """Return the pods in a namespace that carry all the given labels."""
    return cluster.list("Pod", namespace, label_selector=format_label_selector(labels))


def file_exists(path: str | os.PathLike[str]) -> bool:
    """Tell whether a path exists; other stat errors propagate."""
    try:
        os.stat(path)
    except FileNotFoundError:
        return False
    return True


def ensure_dir_exists(path: str | os.PathLike[str]) -> None:
    """Create a directory and its parents if missing."""
    os.makedirs(path, mode=0o755, exist_ok=True)


def map_to_string(mapping: Mapping[str, str]) -> str:
    """Render a mapping as comma separated key=value pairs."""
    if not mapping:
        raise ValueError("cannot render an empty mapping")
    return ",".join(f"{k}={v}" for k, v in mapping.items())