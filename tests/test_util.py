import base64

import pytest

from clusterlens.cluster import Cluster
from clusterlens.util import (
    ensure_dir_exists,
    file_exists,
    get_cache_key,
    get_parent,
    get_pod_list_by_labels,
    map_to_string,
    mask_string,
    remove_duplicates,
    replace_if_match,
    slice_diff,
)


def test_remove_duplicates():
    unique, dups = remove_duplicates(["a", "b", "a"])
    assert unique == ["a", "b"]
    assert dups == ["a"]


def test_slice_diff():
    assert slice_diff(["a", "b", "c"], ["b"]) == ["a", "c"]


def test_mask_string_keeps_length():
    text = "my-secret-name"
    decoded = base64.b64decode(mask_string(text)).decode()
    assert len(decoded) == len(text)


def test_replace_if_match():
    assert replace_if_match("foo bar", "foo", "X") == "X bar"
    assert replace_if_match("foobar", "foo", "X") == "foobar"


def test_cache_key_deterministic():
    key = get_cache_key("openai", "english", "abc")
    assert key == get_cache_key("openai", "english", "abc")
    assert len(key) == 64
    assert key != get_cache_key("openai", "english", "abd")


def test_get_parent_follows_chain():
    dep = {"kind": "Deployment", "metadata": {"name": "web", "namespace": "default"}}
    rs = {"kind": "ReplicaSet", "metadata": {"name": "web-1", "namespace": "default",
          "ownerReferences": [{"kind": "Deployment", "name": "web"}]}}
    c = Cluster([dep, rs])
    meta = {"name": "pod", "namespace": "default",
            "ownerReferences": [{"kind": "ReplicaSet", "name": "web-1"}]}
    assert get_parent(c, meta) == "Deployment/web"


def test_get_parent_without_owner_and_missing_owner():
    c = Cluster()
    assert get_parent(c, {"name": "pod"}) == "pod"
    meta = {"name": "pod", "ownerReferences": [{"kind": "ReplicaSet", "name": "gone"}]}
    assert get_parent(c, meta) == ""


def test_get_pod_list_by_labels():
    c = Cluster([{"kind": "Pod", "metadata": {"name": "p", "namespace": "default",
                                              "labels": {"app": "example"}}}])
    assert len(get_pod_list_by_labels(c, "default", {"app": "example"})) == 1
    assert get_pod_list_by_labels(c, "default", {"app": "other"}) == []


def test_files(tmp_path):
    target = tmp_path / "a" / "b"
    assert not file_exists(target)
    ensure_dir_exists(target)
    ensure_dir_exists(target)
    assert file_exists(target)


def test_map_to_string():
    assert map_to_string({"app": "web"}) == "app=web"
    with pytest.raises(ValueError):
        map_to_string({})