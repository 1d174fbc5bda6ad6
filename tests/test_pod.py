from clusterlens.analyzers.pod import PodAnalyzer
from clusterlens.cluster import Cluster
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext

UNSCHEDULABLE = (
    "0/1 nodes are available: 1 node(s) had taint "
    "{node-role.kubernetes.io/master: }, that the pod didn't tolerate."
)


def _pending_pod(namespace="default", name="example"):
    return {
        "kind": "Pod",
        "metadata": {"name": name, "namespace": namespace, "annotations": {}},
        "status": {
            "phase": "Pending",
            "conditions": [
                {"type": "PodScheduled", "reason": "Unschedulable", "message": UNSCHEDULABLE}
            ],
        },
    }


def _unready_pod():
    return {
        "kind": "Pod",
        "metadata": {"name": "example2", "namespace": "default"},
        "status": {
            "phase": "Running",
            "containerStatuses": [{"name": "example2", "ready": False}],
            "conditions": [
                {
                    "type": "ContainersReady",
                    "reason": "ContainersNotReady",
                    "message": "containers with unready status: [example2]",
                }
            ],
        },
    }


def _event(involved, reason, message):
    return {
        "kind": "Event",
        "metadata": {"name": "foo", "namespace": "default"},
        "involvedObject": {
            "kind": "Pod",
            "name": involved,
            "namespace": "default",
            "uid": "differentUid",
            "apiVersion": "v1",
        },
        "reason": reason,
        "message": message,
        "source": {"component": "eventTest"},
        "count": 1,
        "type": "Warning",
    }


def test_pod_analyzer():
    cluster = Cluster(
        [
            _pending_pod(),
            _unready_pod(),
            _event("example2", "Unhealthy", "readiness probe failed: the detail reason here ..."),
        ]
    )
    results = PodAnalyzer().analyze(AnalysisContext(cluster, namespace="default"))
    assert len(results) == 2
    by_name = {r.name: r for r in results}
    assert [f.text for f in by_name["default/example"].error] == [UNSCHEDULABLE]
    assert [f.text for f in by_name["default/example2"].error] == [
        "readiness probe failed: the detail reason here ..."
    ]
    assert by_name["default/example"].parent_object == "example"


def test_pod_analyzer_namespace_filtering():
    cluster = Cluster([_pending_pod(), _pending_pod(namespace="other-namespace")])
    results = PodAnalyzer().analyze(AnalysisContext(cluster, namespace="default"))
    assert len(results) == 1
    assert results[0].name == "default/example"


def test_crash_loop_message_is_reported():
    pod = {
        "kind": "Pod",
        "metadata": {"name": "crasher", "namespace": "default"},
        "status": {
            "phase": "Running",
            "containerStatuses": [
                {
                    "name": "app",
                    "ready": False,
                    "state": {
                        "waiting": {
                            "reason": "CrashLoopBackOff",
                            "message": "back-off restarting failed container",
                        }
                    },
                }
            ],
        },
    }
    results = PodAnalyzer().analyze(AnalysisContext(Cluster([pod]), namespace="default"))
    assert [f.text for f in results[0].error] == ["back-off restarting failed container"]
    assert ANALYZER_ERRORS.get("Pod", "crasher", "default") == 1.0


def test_container_creating_with_sandbox_failure():
    pod = {
        "kind": "Pod",
        "metadata": {"name": "stuck", "namespace": "default"},
        "status": {
            "phase": "Pending",
            "containerStatuses": [
                {"name": "app", "state": {"waiting": {"reason": "ContainerCreating"}}}
            ],
        },
    }
    event = _event("stuck", "FailedCreatePodSandBox", "failed to set up sandbox")
    results = PodAnalyzer().analyze(AnalysisContext(Cluster([pod, event]), namespace="default"))
    assert [f.text for f in results[0].error] == ["failed to set up sandbox"]


def test_unready_pod_without_matching_event_is_ignored():
    cluster = Cluster([_unready_pod(), _event("example2", "Pulled", "image pulled")])
    assert PodAnalyzer().analyze(AnalysisContext(cluster, namespace="default")) == []


def test_unschedulable_without_message_is_ignored():
    pod = _pending_pod()
    pod["status"]["conditions"][0]["message"] = ""
    assert PodAnalyzer().analyze(AnalysisContext(Cluster([pod]), namespace="default")) == []


def test_parent_of_owned_pod():
    rs = {"kind": "ReplicaSet", "metadata": {"name": "web-rs", "namespace": "default"}}
    pod = _pending_pod()
    pod["metadata"]["ownerReferences"] = [{"kind": "ReplicaSet", "name": "web-rs"}]
    results = PodAnalyzer().analyze(AnalysisContext(Cluster([rs, pod]), namespace="default"))
    assert results[0].parent_object == "ReplicaSet/web-rs"