"""Detection of nodes reporting unhealthy conditions."""

from __future__ import annotations

from typing import Any

from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent


def _condition_failure(node_name: str, condition: dict[str, Any]) -> Failure:
    return Failure(
        text=(
            f"{node_name} has condition of type {condition.get('type', '')}, "
            f"reason {condition.get('reason', '')}: {condition.get('message', '')}"
        ),
        sensitive=[Sensitive.of(node_name)],
    )


def _is_unhealthy(condition: dict[str, Any]) -> bool:
    status = condition.get("status", "")
    if condition.get("type") == "Ready":
        return status != "True"
    # Any other condition, known or not, is a problem unless it is False.
    return status != "False"


class NodeAnalyzer:
    """Reports nodes that are not ready or carry a raised pressure condition."""

    kind = "Node"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per unhealthy node."""
        kind = self.kind
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for node in context.cluster.list(kind):
            meta = node.get("metadata") or {}
            name = meta.get("name", "")
            conditions = (node.get("status") or {}).get("conditions") or []
            failures = [_condition_failure(name, c) for c in conditions if _is_unhealthy(c)]
            if failures:
                found[name] = (meta, failures)
                ANALYZER_ERRORS.set((kind, name, ""), len(failures))

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