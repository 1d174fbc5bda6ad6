from clusterlens.analyzers.netpol import NetworkPolicyAnalyzer
from clusterlens.cluster import Cluster
from clusterlens.types import AnalysisContext


def _policy(namespace, match_labels):
    return {
        "kind": "NetworkPolicy",
        "metadata": {"name": "example", "namespace": namespace},
        "spec": {
            "podSelector": {"matchLabels": match_labels},
            "ingress": [{"from": [{"podSelector": {"matchLabels": {"app": "database"}}}]}],
        },
    }


def _pod():
    return {
        "kind": "Pod",
        "metadata": {"name": "example", "namespace": "default", "labels": {"app": "example"}},
        "spec": {"containers": [{"name": "example", "image": "example"}]},
    }


def _run(objects):
    return NetworkPolicyAnalyzer().analyze(
        AnalysisContext(cluster=Cluster(objects), namespace="default")
    )


def test_netpol_no_pods():
    results = _run([_policy("default", {"app": "example"})])
    assert len(results) == 1
    assert results[0].kind == "NetworkPolicy"
    assert results[0].error[0].text == "Network policy is not applied to any pods: example"


def test_netpol_with_pod():
    assert _run([_policy("default", {"app": "example"}), _pod()]) == []


def test_netpol_no_pods_namespace_filtering():
    results = _run(
        [_policy("default", {"app": "example"}), _policy("other-namespace", {"app": "example"})]
    )
    assert len(results) == 1
    assert results[0].kind == "NetworkPolicy"
    assert results[0].name == "default/example"


def test_netpol_empty_selector_allows_all():
    results = _run([_policy("default", {})])
    assert len(results) == 1
    assert results[0].error[0].text == "Network policy allows traffic to all pods: example"