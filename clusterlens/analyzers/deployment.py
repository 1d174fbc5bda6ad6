"""Detection of deployments whose replica count does not match their spec."""

from __future__ import annotations

from clusterlens.apireference import ApiReference
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive


class DeploymentAnalyzer:
    """Reports deployments whose current replicas differ from the desired count."""

    kind = "Deployment"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per broken deployment."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind, group="apps", version="v1", openapi_schema=context.openapi_schema
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, list[Failure]] = {}
        for deployment in context.cluster.list(kind, context.namespace):
            meta = deployment.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            spec = deployment.get("spec") or {}
            status = deployment.get("status") or {}
            desired = spec.get("replicas")
            if desired is None:
                desired = 1
            current = status.get("replicas") or 0

            failures: list[Failure] = []
            if desired != current:
                failures.append(
                    Failure(
                        text=(
                            f"Deployment {namespace}/{name} has {desired} replicas "
                            f"but {current} are available"
                        ),
                        kubernetes_doc=api_doc.get_api_doc("spec.replicas"),
                        sensitive=[Sensitive.of(namespace), Sensitive.of(name)],
                    )
                )
            if failures:
                found[f"{namespace}/{name}"] = failures
                ANALYZER_ERRORS.set((kind, name, namespace), len(failures))

        results = list(context.results)
        results.extend(Result(kind=kind, name=key, error=f) for key, f in found.items())
        return results