# clusterlens

`clusterlens` checks Kubernetes objects for common misconfigurations and
failures: pods that cannot be scheduled, crash-loop or fail readiness probes,
deployments missing replicas, services with no endpoints, ingresses pointing at
missing classes, services or secrets, broken cron schedules, unhealthy nodes,
and more. Each finding carries an optional field description taken from an
OpenAPI v2 schema, and a list of sensitive values (names, namespaces, labels)
paired with random masked stand-ins.

The analyzers read from an in-memory `Cluster`. Fill it with object
dictionaries shaped like Kubernetes API resources, for example the items of
`kubectl get -o json` output, a YAML dump or a test fixture.

## Installation

```
pip install clusterlens
```

## Usage

```python
from clusterlens.cluster import Cluster
from clusterlens.types import AnalysisContext
from clusterlens.analyzers.deployment import DeploymentAnalyzer

cluster = Cluster([
    {
        "kind": "Deployment",
        "metadata": {"name": "web", "namespace": "default"},
        "spec": {"replicas": 3},
        "status": {"replicas": 2},
    }
])

context = AnalysisContext(cluster=cluster, namespace="default")
for result in DeploymentAnalyzer().analyze(context):
    print(result.kind, result.name)
    for failure in result.error:
        print("  ", failure.text)
```

Every analyzer has an `analyze(context)` method that returns the results
already in `context.results` followed by one `Result` per object with
problems. An empty `namespace` means all namespaces. Pass the parsed swagger
document as `openapi_schema` to fill in `Failure.kubernetes_doc`.
`Result.to_dict()` gives a JSON-ready form.

### Analyzers

| Module | Class | Checks |
| --- | --- | --- |
| `clusterlens.analyzers.pod` | `PodAnalyzer` | unschedulable pods, back-off waits, sandbox creation failures, failed readiness |
| `clusterlens.analyzers.deployment` | `DeploymentAnalyzer` | desired and current replicas differ |
| `clusterlens.analyzers.replicaset` | `ReplicaSetAnalyzer` | empty replica sets with a `FailedCreate` condition |
| `clusterlens.analyzers.pvc` | `PvcAnalyzer` | pending claims whose latest event is `ProvisioningFailed` |
| `clusterlens.analyzers.hpa` | `HpaAnalyzer` | unsupported, missing or resource-less scale targets |
| `clusterlens.analyzers.statefulset` | `StatefulSetAnalyzer` | missing governing service or storage class |
| `clusterlens.analyzers.cronjob` | `CronJobAnalyzer` | suspended jobs, invalid schedules, negative starting deadlines |
| `clusterlens.analyzers.service` | `ServiceAnalyzer` | services without endpoints, not-ready endpoint addresses |
| `clusterlens.analyzers.ingress` | `IngressAnalyzer` | missing ingress class, backend service or TLS secret |
| `clusterlens.analyzers.netpol` | `NetworkPolicyAnalyzer` | policies selecting every pod or no pod |
| `clusterlens.analyzers.node` | `NodeAnalyzer` | nodes not ready or reporting any other raised condition |
| `clusterlens.analyzers.pdb` | `PdbAnalyzer` | budgets that currently allow no disruption |

`clusterlens.analyzers.events.fetch_latest_event` returns the newest event
recorded for a named object.

### The cluster store

`clusterlens.cluster.Cluster` answers `list(kind, namespace, label_selector,
field_selector)` and `get(kind, name, namespace)`; `get` raises
`NotFoundError` for an absent object. Cluster-scoped kinds such as `Node`,
`StorageClass` and `IngressClass` ignore the namespace. The module also has
`format_label_selector`, `parse_label_selector` and `labels_match`.

### Metrics

Each analyzer records its failure count per object in
`clusterlens.metrics.ANALYZER_ERRORS`, a `GaugeVec` labelled by analyzer name,
object name and namespace, and clears its own entries at the start of each
run. `samples()` returns every gauge with its labels.

### Helpers

- `clusterlens.util.mask_string` gives a random base64 stand-in for a value.
- `clusterlens.util.get_cache_key` derives a SHA-256 cache key.
- `clusterlens.util.get_parent` follows owner references to the topmost owner.
- `clusterlens.cron.parse_standard` and `check_cron_schedule_is_valid` parse
  five-field cron schedules, descriptors such as `@hourly`, `@every 5m` and a
  `TZ=` or `CRON_TZ=` prefix, raising `CronSyntaxError` when invalid.
- `clusterlens.apireference.ApiReference.get_api_doc` looks up the
  description of a dotted field path in an OpenAPI v2 document.

### Cache

`clusterlens.cache.FileCache` stores each entry as a file in one directory,
by default the user cache directory for `clusterlens`. `add_remote_cache`,
`remove_remote_cache` and `remote_cache_enabled` read and write the `cache`
section (`bucketname`, `region`) of a YAML configuration file, raising
`CacheConfigError` on bad input.

## What it does not do

- It does not connect to a live cluster; objects must be loaded into a
  `Cluster` first.
- There is no command-line tool and no server.
- There is no single registry that runs every analyzer; import and run the
  ones you need.
- It has no analyzer for mutating or validating webhook configurations.
- The remote cache settings are only recorded; nothing is stored remotely.

## Running the tests

```
pip install -e .[test]
pytest
```