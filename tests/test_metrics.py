import pytest

from clusterlens.metrics import GaugeVec


def _vec():
    return GaugeVec("analyzer_errors", "help", ["analyzer_name", "object_name", "namespace"])


def test_set_and_get():
    g = _vec()
    g.set(("Pod", "web", "default"), 2)
    assert g.get("Pod", "web", "default") == 2.0
    with pytest.raises(KeyError):
        g.get("Pod", "db", "default")


def test_wrong_label_count():
    with pytest.raises(ValueError):
        _vec().set(("Pod",), 1)


def test_delete_partial_match():
    g = _vec()
    g.set(("Pod", "a", "default"), 1)
    g.set(("Pod", "b", "default"), 1)
    g.set(("Node", "n", ""), 1)
    assert g.delete_partial_match({"analyzer_name": "Pod"}) == 2
    assert g.samples() == [({"analyzer_name": "Node", "object_name": "n", "namespace": ""}, 1.0)]
    assert g.delete_partial_match({"unknown": "x"}) == 0