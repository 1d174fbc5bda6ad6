"""Detection of network policies that select every pod or no pod at all."""

from __future__ import annotations

from clusterlens.apireference import ApiReference
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_pod_list_by_labels


class NetworkPolicyAnalyzer:
    """Reports policies that match all pods, or whose selector matches none."""

    kind = "NetworkPolicy"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per suspect policy."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind,
            group="networking",
            version="v1",
            openapi_schema=context.openapi_schema,
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, list[Failure]] = {}
        for policy in context.cluster.list(kind, context.namespace):
            meta = policy.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            selector = (policy.get("spec") or {}).get("podSelector") or {}
            match_labels = selector.get("matchLabels") or {}

            failures: list[Failure] = []
            if not match_labels:
                failures.append(
                    Failure(
                        text=f"Network policy allows traffic to all pods: {name}",
                        kubernetes_doc=api_doc.get_api_doc("spec.podSelector.matchLabels"),
                        sensitive=[Sensitive.of(name)],
                    )
                )
            elif not get_pod_list_by_labels(context.cluster, context.namespace, match_labels):
                failures.append(
                    Failure(
                        text=f"Network policy is not applied to any pods: {name}",
                        sensitive=[Sensitive.of(name)],
                    )
                )

            if failures:
                found[f"{namespace}/{name}"] = failures
                ANALYZER_ERRORS.set((kind, name, namespace), len(failures))

        results = list(context.results)
        results.extend(Result(kind=kind, name=key, error=f) for key, f in found.items())
        return results