"""Detection of pods that cannot be scheduled, start, or become ready."""

from __future__ import annotations

from typing import Any

from clusterlens.analyzers.events import fetch_latest_event
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result
from clusterlens.util import get_parent

_BACKOFF_REASONS = frozenset({"CrashLoopBackOff", "ImagePullBackOff"})


class PodAnalyzer:
    """Reports unschedulable, crashing, stuck or unready pods."""

    kind = "Pod"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by one result per failing pod."""
        kind = self.kind
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        found: dict[str, tuple[dict[str, Any], list[Failure]]] = {}
        for pod in context.cluster.list(kind, context.namespace):
            meta = pod.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            failures = self._pod_failures(context, pod, name, namespace)
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
    def _event_failure(
        context: AnalysisContext, namespace: str, name: str, reason: str
    ) -> Failure | None:
        event = fetch_latest_event(context.cluster, namespace, name)
        if event is None:
            return None
        message = event.get("message", "")
        if event.get("reason") == reason and message:
            return Failure(text=message)
        return None

    def _pod_failures(
        self, context: AnalysisContext, pod: dict[str, Any], name: str, namespace: str
    ) -> list[Failure]:
        status = pod.get("status") or {}
        phase = status.get("phase", "")
        failures: list[Failure] = []

        if phase == "Pending":
            failures.extend(
                Failure(text=condition["message"])
                for condition in status.get("conditions") or []
                if condition.get("type") == "PodScheduled"
                and condition.get("reason") == "Unschedulable"
                and condition.get("message")
            )

        for container in status.get("containerStatuses") or []:
            waiting = (container.get("state") or {}).get("waiting")
            if waiting is not None:
                reason = waiting.get("reason", "")
                if reason in _BACKOFF_REASONS and waiting.get("message"):
                    failures.append(Failure(text=waiting["message"]))
                if reason == "ContainerCreating" and phase == "Pending":
                    failure = self._event_failure(
                        context, namespace, name, "FailedCreatePodSandBox"
                    )
                    if failure is not None:
                        failures.append(failure)
            elif not container.get("ready", False) and phase == "Running":
                failure = self._event_failure(context, namespace, name, "Unhealthy")
                if failure is not None:
                    failures.append(failure)

        return failures