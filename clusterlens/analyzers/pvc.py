"""Detection of persistent volume claims stuck pending on provisioning."""

from __future__ import annotations

from typing import Any

from clusterlens.analyzers.events import fetch_latest_event
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result
from clusterlens.util import get_parent


class PvcAnalyzer:
    """Reports pending claims whose latest event is a provisioning failure."""

    kind = "PersistentVolumeClaim"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per failing claim."""
        kind = self.kind
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for pvc in context.cluster.list(kind, context.namespace):
            meta = pvc.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            status = pvc.get("status") or {}

            failures: list[Failure] = []
            if status.get("phase") == "Pending":
                event = fetch_latest_event(context.cluster, namespace, name)
                if event is None:
                    continue
                message = event.get("message", "")
                if event.get("reason") == "ProvisioningFailed" and message:
                    failures.append(Failure(text=message))
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