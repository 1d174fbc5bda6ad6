"""Detection of pod disruption budgets that currently forbid any disruption."""

from __future__ import annotations

from typing import Any

from clusterlens.apireference import ApiReference
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent


class PdbAnalyzer:
    """Reports budgets whose first condition says disruption is not allowed."""

    kind = "PodDisruptionBudget"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per blocking budget."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind, group="policy", version="v1", openapi_schema=context.openapi_schema
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for pdb in context.cluster.list(kind, context.namespace):
            meta = pdb.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            failures = self._failures(api_doc, pdb)
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

    @staticmethod
    def _failures(api_doc: ApiReference, pdb: dict[str, Any]) -> list[Failure]:
        conditions = (pdb.get("status") or {}).get("conditions") or []
        if not conditions:
            return []
        first = conditions[0]
        if first.get("type") != "DisruptionAllowed" or first.get("status") != "False":
            return []

        spec = pdb.get("spec") or {}
        doc = ""
        if spec.get("maxUnavailable") is not None:
            doc = api_doc.get_api_doc("spec.maxUnavailable")
        if spec.get("minAvailable") is not None:
            doc = api_doc.get_api_doc("spec.minAvailable")

        reason = first.get("reason", "")
        match_labels = (spec.get("selector") or {}).get("matchLabels") or {}
        return [
            Failure(
                text=f"{reason}, expected pdb pod label {key}={value}",
                kubernetes_doc=doc,
                sensitive=[Sensitive.of(key), Sensitive.of(value)],
            )
            for key, value in match_labels.items()
        ]