"""Detection of replica sets that fail to create their pods."""

from __future__ import annotations

from typing import Any

from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result
from clusterlens.util import get_parent


class ReplicaSetAnalyzer:
    """Reports empty replica sets that carry a FailedCreate condition."""

    kind = "ReplicaSet"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per failing replica set."""
        kind = self.kind
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for rs in context.cluster.list(kind, context.namespace):
            meta = rs.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            status = rs.get("status") or {}

            failures: list[Failure] = []
            if not status.get("replicas"):
                failures.extend(
                    Failure(text=condition.get("message", ""))
                    for condition in status.get("conditions") or []
                    if condition.get("type") == "ReplicaFailure"
                    and condition.get("reason") == "FailedCreate"
                )
            if failures:
                found[f"{namespace}/{name}"] = (meta, failures)
                ANALYZER_ERRORS.set((kind, name, namespace), len(failures))

        results = list(context.results)
        for key, (meta, failures) in found.items():
            results.append(
                Result(
                    kind=kind,
                    name=key,
                    error=failures,
                    parent_object=get_parent(context.cluster, meta),
                )
            )
        return results