"""Detection of stateful sets that reference missing services or storage classes."""

from __future__ import annotations

from typing import Any

from clusterlens.apireference import ApiReference
from clusterlens.cluster import NotFoundError
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent


class StatefulSetAnalyzer:
    """Reports stateful sets whose governing service or storage class is absent."""

    kind = "StatefulSet"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per broken stateful set."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind, group="apps", version="v1", openapi_schema=context.openapi_schema
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for sts in context.cluster.list(kind, context.namespace):
            meta = sts.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            failures = self._failures(context, api_doc, sts, namespace)
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
        sts: dict[str, Any],
        namespace: str,
    ) -> list[Failure]:
        spec = sts.get("spec") or {}
        failures: list[Failure] = []

        service_name = spec.get("serviceName", "")
        try:
            context.cluster.get("Service", service_name, namespace)
        except NotFoundError:
            failures.append(
                Failure(
                    text=(
                        f"StatefulSet uses the service {namespace}/{service_name} "
                        "which does not exist."
                    ),
                    kubernetes_doc=api_doc.get_api_doc("spec.serviceName"),
                    sensitive=[Sensitive.of(namespace), Sensitive.of(service_name)],
                )
            )

        for template in spec.get("volumeClaimTemplates") or []:
            storage_class = (template.get("spec") or {}).get("storageClassName")
            if storage_class is None:
                continue
            try:
                context.cluster.get("StorageClass", storage_class)
            except NotFoundError:
                failures.append(
                    Failure(
                        text=(
                            f"StatefulSet uses the storage class {storage_class} "
                            "which does not exist."
                        ),
                        sensitive=[Sensitive.of(storage_class)],
                    )
                )
        return failures