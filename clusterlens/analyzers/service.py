"""Detection of services without endpoints or with endpoints that are not ready."""

from __future__ import annotations

from typing import Any

from clusterlens.apireference import ApiReference
from clusterlens.cluster import NotFoundError
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent

_YELLOW = "\033[33m"
_RESET = "\033[0m"


class ServiceAnalyzer:
    """Reports services with no endpoints and endpoints with unready addresses."""

    kind = "Service"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per broken service."""
        kind = self.kind
        service_doc = ApiReference(
            kind=kind, group="", version="v1", openapi_schema=context.openapi_schema
        )
        endpoints_doc = ApiReference(
            kind="Endpoints", group="", version="v1", openapi_schema=context.openapi_schema
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for endpoints in context.cluster.list("Endpoints", context.namespace):
            meta = endpoints.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            subsets = endpoints.get("subsets") or []

            failures: list[Failure] = []
            if not subsets:
                try:
                    service = context.cluster.get("Service", name, namespace)
                except NotFoundError:
                    print(f"{_YELLOW}Service {namespace}/{name} does not exist{_RESET}")
                    continue
                selector = (service.get("spec") or {}).get("selector") or {}
                for key, value in selector.items():
                    failures.append(
                        Failure(
                            text=f"Service has no endpoints, expected label {key}={value}",
                            kubernetes_doc=service_doc.get_api_doc("spec.selector"),
                            sensitive=[Sensitive.of(key), Sensitive.of(value)],
                        )
                    )
            else:
                failures.extend(self._not_ready_failures(endpoints_doc, subsets))

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
    def _not_ready_failures(
        api_doc: ApiReference, subsets: list[dict[str, Any]]
    ) -> list[Failure]:
        # Pods accumulate across subsets, so later failures repeat earlier pods.
        pods: list[str] = []
        failures: list[Failure] = []
        for subset in subsets:
            not_ready = subset.get("notReadyAddresses") or []
            if not not_ready:
                continue
            for address in not_ready:
                target = address.get("targetRef") or {}
                pods.append(f"{target.get('kind', '')}/{target.get('name', '')}")
            failures.append(
                Failure(
                    text=(
                        f"Service has not ready endpoints, pods: [{' '.join(pods)}], "
                        f"expected {len(pods)}"
                    ),
                    kubernetes_doc=api_doc.get_api_doc("subsets.notReadyAddresses"),
                )
            )
        return failures