"""Detection of suspended or misconfigured cron jobs."""

from __future__ import annotations

from clusterlens.apireference import ApiReference
from clusterlens.cron import CronSyntaxError, check_cron_schedule_is_valid
from clusterlens.metrics import ANALYZER_ERRORS
from clusterlens.types import AnalysisContext, Failure, Result, Sensitive


class CronJobAnalyzer:
    """Reports cron jobs that are suspended, badly scheduled or have a negative deadline."""

    kind = "CronJob"

    def analyze(self, context: AnalysisContext) -> list[Result]:
        """Return the context's results followed by results for broken cron jobs.

        After each cron job, every failure gathered so far is emitted again, so
        an earlier broken job appears once for every job that follows it.
        """
        kind = self.kind
        api_doc = ApiReference(
            kind=kind, group="batch", version="v1", openapi_schema=context.openapi_schema
        )
        ANALYZER_ERRORS.delete_partial_match({"analyzer_name": kind})

        results = list(context.results)
        found: dict[str, list[Failure]] = {}
        for cron_job in context.cluster.list(kind, context.namespace):
            meta = cron_job.get("metadata") or {}
            name = meta.get("name", "")
            namespace = meta.get("namespace", "")
            spec = cron_job.get("spec") or {}
            masked = [Sensitive.of(namespace), Sensitive.of(name)]

            failures: list[Failure] = []
            if spec.get("suspend"):
                failures.append(
                    Failure(
                        text=f"CronJob {name} is suspended",
                        kubernetes_doc=api_doc.get_api_doc("spec.suspend"),
                        sensitive=masked,
                    )
                )
            else:
                try:
                    check_cron_schedule_is_valid(spec.get("schedule", ""))
                except CronSyntaxError as exc:
                    failures.append(
                        Failure(
                            text=f"CronJob {name} has an invalid schedule: {exc}",
                            kubernetes_doc=api_doc.get_api_doc("spec.schedule"),
                            sensitive=list(masked),
                        )
                    )
                deadline = spec.get("startingDeadlineSeconds")
                if deadline is not None and deadline < 0:
                    failures.append(
                        Failure(
                            text=f"CronJob {name} has a negative starting deadline",
                            kubernetes_doc=api_doc.get_api_doc(
                                "spec.startingDeadlineSeconds"
                            ),
                            sensitive=list(masked),
                        )
                    )

            if failures:
                found[f"{namespace}/{name}"] = failures
                ANALYZER_ERRORS.set((kind, name, namespace), len(failures))

            results.extend(Result(kind=kind, name=key, error=f) for key, f in found.items())
        return results