"""Look up field documentation in an OpenAPI v2 (swagger) document."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


def _is_string_type(prop: dict[str, Any]) -> bool:
    kind = prop.get("type")
    return kind == "string" or kind == ["string"]


def _last_ref_part(ref: str) -> str:
    return ref.split("/")[-1]


@dataclass
class ApiReference:
    """A kind within an API group and version, with the schema to search."""

    kind: str
    group: str = ""
    version: str = "v1"
    openapi_schema: dict[str, Any] | None = None

    def get_api_doc(self, field: str) -> str:
        """Return the description of a dotted field path, or an empty string."""
        paths = field.split(".")
        group = self.group.split(".")[0]
        definitions = (self.openapi_schema or {}).get("definitions") or {}
        suffix = f"{group}.{self.version}.{self.kind}"
        start = next((name for name in definitions if name.endswith(suffix)), "")
        return self._recurse(definitions, start, paths)

    def _recurse(self, definitions: dict[str, Any], leaf: str, paths: list[str]) -> str:
        schema = definitions.get(leaf)
        if schema is None:
            return ""
        prop = (schema.get("properties") or {}).get(paths[0])
        if prop is None:
            return ""
        if len(paths) == 1 or _is_string_type(prop):
            return prop.get("description", "")
        description = ""
        if prop.get("$ref"):
            description = self._recurse(definitions, _last_ref_part(prop["$ref"]), paths[1:])
        items = prop.get("items")
        if isinstance(items, dict):
            description = self._recurse(
                definitions, _last_ref_part(items.get("$ref", "")), paths[1:]
            )
        return description