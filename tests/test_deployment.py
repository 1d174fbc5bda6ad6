from clusterlens.analyzers.deployment import DeploymentAnalyzer
from clusterlens.cluster import Cluster
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Result


def _deployment(namespace, replicas=3, current=2, name="example"):
    return {
        "kind": "Deployment",
        "metadata": {"name": name, "namespace": namespace},
        "spec": {
            "replicas": replicas,
            "template": {
                "spec": {
                    "containers": [
                        {
                            "name": "example-container",
                            "image": "nginx",
                            "ports": [{"containerPort": 80}],
                        }
                    ]
                }
            },
        },
        "status": {"replicas": current, "availableReplicas": 1},
    }


def test_deployment_analyzer():
    context = AnalysisContext(Cluster([_deployment("default")]), namespace="default")
    results = DeploymentAnalyzer().analyze(context)
    assert len(results) == 1
    assert results[0].kind == "Deployment"
    assert results[0].name == "default/example"


def test_deployment_analyzer_namespace_filtering():
    cluster = Cluster([_deployment("default"), _deployment("other-namespace")])
    results = DeploymentAnalyzer().analyze(AnalysisContext(cluster, namespace="default"))
    assert len(results) == 1
    assert results[0].kind == "Deployment"
    assert results[0].name == "default/example"


def test_failure_text_and_sensitive_values():
    context = AnalysisContext(Cluster([_deployment("default")]), namespace="default")
    failure = DeploymentAnalyzer().analyze(context)[0].error[0]
    assert failure.text == "Deployment default/example has 3 replicas but 2 are available"
    assert [s.unmasked for s in failure.sensitive] == ["default", "example"]
    assert all(s.masked != s.unmasked for s in failure.sensitive)


def test_matching_replicas_is_healthy():
    context = AnalysisContext(
        Cluster([_deployment("default", replicas=2, current=2)]), namespace="default"
    )
    assert DeploymentAnalyzer().analyze(context) == []


def test_metric_records_failure_count():
    context = AnalysisContext(Cluster([_deployment("default")]), namespace="default")
    DeploymentAnalyzer().analyze(context)
    assert ANALYZER_ERRORS.get("Deployment", "example", "default") == 1.0


def test_existing_results_are_kept_first():
    earlier = Result(kind="Pod", name="default/p")
    context = AnalysisContext(
        Cluster([_deployment("default")]), namespace="default", results=[earlier]
    )
    results = DeploymentAnalyzer().analyze(context)
    assert results[0] is earlier
    assert [r.kind for r in results] == ["Pod", "Deployment"]
    assert context.results == [earlier]


def test_doc_comes_from_schema():
    schema = {
        "definitions": {
            "io.k8s.api.apps.v1.Deployment": {
                "properties": {"spec": {"$ref": "#/definitions/io.k8s.api.apps.v1.DeploymentSpec"}}
            },
            "io.k8s.api.apps.v1.DeploymentSpec": {
                "properties": {"replicas": {"description": "Number of desired pods."}}
            },
        }
    }
    context = AnalysisContext(
        Cluster([_deployment("default")]), namespace="default", openapi_schema=schema
    )
    failure = DeploymentAnalyzer().analyze(context)[0].error[0]
    assert failure.kubernetes_doc == "Number of desired pods."