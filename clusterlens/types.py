"""Core data types shared by the analyzers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from clusterlens.cluster import Cluster
from clusterlens.util import mask_string


@dataclass(frozen=True)
class Sensitive:
    """A value that may need to be hidden, with its masked replacement."""

    unmasked: str
    masked: str

    @classmethod
    def of(cls, value: str) -> "Sensitive":
        """Build a pair from a value, masking it at random."""
        return cls(unmasked=value, masked=mask_string(value))

    def to_dict(self) -> dict[str, str]:
        return {"Unmasked": self.unmasked, "Masked": self.masked}


@dataclass
class Failure:
    """One problem found on an object."""

    text: str
    kubernetes_doc: str = ""
    sensitive: list[Sensitive] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Text": self.text,
            "KubernetesDoc": self.kubernetes_doc,
            "Sensitive": [s.to_dict() for s in self.sensitive],
        }


@dataclass
class Result:
    """The failures found for one object of one kind."""

    kind: str
    name: str
    error: list[Failure] = field(default_factory=list)
    details: str = ""
    parent_object: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Return the result in its serialised form."""
        return {
            "kind": self.kind,
            "name": self.name,
            "error": [f.to_dict() for f in self.error],
            "details": self.details,
            "parentObject": self.parent_object,
        }


@dataclass
class AnalysisContext:
    """What an analyzer works on: a cluster, a namespace and a schema."""

    cluster: Cluster
    namespace: str = ""
    openapi_schema: dict[str, Any] | None = None
    results: list[Result] = field(default_factory=list)