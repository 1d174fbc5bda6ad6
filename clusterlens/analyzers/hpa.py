"""Detection of horizontal pod autoscalers with missing or unusable targets."""

from __future__ import annotations

from typing import Any

from clusterlens.apireference import ApiReference
from clusterlens.cluster import NotFoundError
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent

_TARGET_KINDS = frozenset(
    {"Deployment", "ReplicationController", "ReplicaSet", "StatefulSet"}
)


def _pod_spec(target: dict[str, Any]) -> dict[str, Any]:
    template = (target.get("spec") or {}).get("template") or {}
    return template.get("spec") or {}


def _has_resources(container: dict[str, Any]) -> bool:
    resources = container.get("resources") or {}
    return bool(resources.get("requests")) and bool(resources.get("limits"))


class HpaAnalyzer:
    """Reports autoscalers whose scale target is unsupported, absent or unconfigured."""

    kind = "HorizontalPodAutoscaler"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per broken autoscaler."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind,
            group="autoscaling",
            version="v1",
            openapi_schema=context.openapi_schema,
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for hpa in context.cluster.list(kind, context.namespace):
            meta = hpa.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            failures = self._failures(context, api_doc, hpa, namespace)
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
    def _failures(
        context: AnalysisContext,
        api_doc: ApiReference,
        hpa: dict[str, Any],
        namespace: str,
    ) -> list[Failure]:
        ref = (hpa.get("spec") or {}).get("scaleTargetRef") or {}
        target_kind = ref.get("kind", "")
        target_name = ref.get("name", "")
        failures: list[Failure] = []

        target: dict[str, Any] | None = None
        if target_kind in _TARGET_KINDS:
            try:
                target = context.cluster.get(target_kind, target_name, namespace)
            except NotFoundError:
                target = None
        else:
            failures.append(
                Failure(
                    text=(
                        f"HorizontalPodAutoscaler uses {target_kind} as "
                        "ScaleTargetRef which is not an option."
                    )
                )
            )

        if target is None:
            failures.append(
                Failure(
                    text=(
                        f"HorizontalPodAutoscaler uses {target_kind}/{target_name} "
                        "as ScaleTargetRef which does not exist."
                    ),
                    kubernetes_doc=api_doc.get_api_doc("spec.scaleTargetRef"),
                    sensitive=[Sensitive.of(target_name)],
                )
            )
            return failures

        containers = _pod_spec(target).get("containers") or []
        configured = sum(1 for c in containers if _has_resources(c))
        if configured <= 0:
            failures.append(
                Failure(
                    text=(
                        f"{target_kind} {context.namespace}/{target_name} "
                        "does not have resource configured."
                    ),
                    kubernetes_doc=api_doc.get_api_doc("spec.scaleTargetRef.kind"),
                    sensitive=[Sensitive.of(target_name)],
                )
            )
        return failures