from clusterlens.analyzers.ingress import IngressAnalyzer
from clusterlens.cluster import Cluster
from clusterlens.types import AnalysisContext


def _ingress(name, namespace, spec=None, annotations=None):
    obj = {
        "kind": "Ingress",
        "metadata": {"name": name, "namespace": namespace, "annotations": annotations or {}},
    }
    if spec is not None:
        obj["spec"] = spec
    return obj


def _run(objects, namespace="default"):
    return IngressAnalyzer().analyze(AnalysisContext(cluster=Cluster(objects), namespace=namespace))


def _texts(results):
    return [f.text for r in results for f in r.error]


def test_ingress_analyzer():
    assert len(_run([_ingress("example", "default")])) == 1


def test_ingress_analyzer_with_multiple_ingresses():
    assert len(_run([_ingress("example", "default"), _ingress("example-2", "default")])) == 2


def test_ingress_analyzer_without_ingress_class_annotation():
    results = _run([_ingress("example", "default")])
    assert any("does not specify an Ingress class" in t for t in _texts(results))


def test_ingress_analyzer_namespace_filtering():
    results = _run([_ingress("example", "default"), _ingress("example", "other-namespace")])
    assert len(results) == 1
    assert results[0].name == "default/example"


def test_missing_ingress_class_from_annotation():
    results = _run([_ingress("example", "default", annotations={"kubernetes.io/ingress.class": "nginx"})])
    assert _texts(results) == ["Ingress uses the ingress class nginx which does not exist."]


def test_healthy_ingress_has_no_result():
    objects = [
        {"kind": "IngressClass", "metadata": {"name": "nginx"}},
        {"kind": "Service", "metadata": {"name": "web", "namespace": "default"}},
        {"kind": "Secret", "metadata": {"name": "tls-cert", "namespace": "default"}},
        _ingress(
            "example",
            "default",
            spec={
                "ingressClassName": "nginx",
                "rules": [{"http": {"paths": [{"backend": {"service": {"name": "web"}}}]}}],
                "tls": [{"secretName": "tls-cert"}],
            },
        ),
    ]
    assert _run(objects) == []


def test_missing_backend_service_and_secret():
    objects = [
        {"kind": "IngressClass", "metadata": {"name": "nginx"}},
        _ingress(
            "example",
            "default",
            spec={
                "ingressClassName": "nginx",
                "rules": [{"http": {"paths": [{"backend": {"service": {"name": "web"}}}]}}],
                "tls": [{"secretName": "tls-cert"}],
            },
        ),
    ]
    assert _texts(_run(objects)) == [
        "Ingress uses the service default/web which does not exist.",
        "Ingress uses the secret default/tls-cert as a TLS certificate which does not exist.",
    ]