"""Detection of ingresses that reference missing classes, services or secrets."""

from __future__ import annotations

from typing import Any

from clusterlens.apireference import ApiReference
from clusterlens.cluster import NotFoundError
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive
from clusterlens.util import get_parent

_CLASS_ANNOTATION = "kubernetes.io/ingress.class"


class IngressAnalyzer:
    """Reports ingresses without a usable class, backend service or TLS secret."""

    kind = "Ingress"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per broken ingress."""
        kind = self.kind
        api_doc = ApiReference(
            kind=kind,
            group="networking",
            version="v1",
            openapi_schema=context.openapi_schema,
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for ingress in context.cluster.list(kind, context.namespace):
            meta = ingress.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            failures = self._failures(context, api_doc, ingress, name, namespace)
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
        ingress: dict[str, Any],
        name: str,
        namespace: str,
    ) -> list[Failure]:
        cluster = context.cluster
        spec = ingress.get("spec") or {}
        meta = ingress.get("metadata") or {}
        failures: list[Failure] = []

        class_name = spec.get("ingressClassName")
        if class_name is None:
            annotated = (meta.get("annotations") or {}).get(_CLASS_ANNOTATION, "")
            if annotated:
                class_name = annotated
            else:
                failures.append(
                    Failure(
                        text=f"Ingress {namespace}/{name} does not specify an Ingress class.",
                        kubernetes_doc=api_doc.get_api_doc("spec.ingressClassName"),
                        sensitive=[Sensitive.of(namespace), Sensitive.of(name)],
                    )
                )

        if class_name is not None:
            try:
                cluster.get("IngressClass", class_name)
            except NotFoundError:
                failures.append(
                    Failure(
                        text=f"Ingress uses the ingress class {class_name} which does not exist.",
                        kubernetes_doc=api_doc.get_api_doc("spec.ingressClassName"),
                        sensitive=[Sensitive.of(class_name)],
                    )
                )

        for rule in spec.get("rules") or []:
            for path in (rule.get("http") or {}).get("paths") or []:
                service = ((path.get("backend") or {}).get("service") or {}).get("name", "")
                try:
                    cluster.get("Service", service, namespace)
                except NotFoundError:
                    failures.append(
                        Failure(
                            text=(
                                f"Ingress uses the service {namespace}/{service} "
                                "which does not exist."
                            ),
                            kubernetes_doc=api_doc.get_api_doc(
                                "spec.rules.http.paths.backend.service"
                            ),
                            sensitive=[Sensitive.of(namespace), Sensitive.of(service)],
                        )
                    )

        for tls in spec.get("tls") or []:
            secret_name = tls.get("secretName", "")
            try:
                cluster.get("Secret", secret_name, namespace)
            except NotFoundError:
                failures.append(
                    Failure(
                        text=(
                            f"Ingress uses the secret {namespace}/{secret_name} "
                            "as a TLS certificate which does not exist."
                        ),
                        kubernetes_doc=api_doc.get_api_doc("spec.tls.secretName"),
                        sensitive=[Sensitive.of(namespace), Sensitive.of(secret_name)],
                    )
                )
        return failures