"""A file-based store for analysis output, and the remote cache settings."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import platformdirs
import yaml

from clusterlens.util import ensure_dir_exists, file_exists


class CacheConfigError(Exception):
    """Raised when the cache configuration cannot be read or changed."""


@dataclass
class CacheProvider:
    """Where a remote cache lives."""

    bucket_name: str = ""
    region: str = ""

    @classmethod
    def from_mapping(cls, data: Any) -> "CacheProvider":
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise CacheConfigError("cache configuration must be a mapping")
        return cls(
            bucket_name=str(data.get("bucketname") or ""),
            region=str(data.get("region") or ""),
        )

    def to_mapping(self) -> dict[str, str]:
        return {"bucketname": self.bucket_name, "region": self.region}


def _default_directory() -> Path:
    return Path(platformdirs.user_cache_dir("clusterlens"))


class FileCache:
    """Stores each entry as a file named by its key in one directory."""

    def __init__(
        self, no_cache: bool = False, directory: str | os.PathLike[str] | None = None
    ) -> None:
        self.no_cache = no_cache
        self.directory = Path(directory) if directory is not None else _default_directory()

    def is_cache_disabled(self) -> bool:
        """Tell whether caching was turned off."""
        return self.no_cache

    def list(self) -> list[str]:
        """Return the stored keys, sorted; the directory must exist."""
        return sorted(entry.name for entry in os.scandir(self.directory))

    def exists(self, key: str) -> bool:
        """Tell whether a key is stored; errors are reported and count as absent."""
        try:
            return file_exists(self.directory / key)
        except OSError as exc:
            print(
                f"warning: error while testing if cache key exists: {exc}",
                file=sys.stderr,
            )
            return False

    def load(self, key: str) -> str:
        """Return the data stored under a key."""
        return (self.directory / key).read_text(encoding="utf-8")

    def store(self, key: str, data: str) -> None:
        """Write data under a key, readable by the owner only."""
        path = self.directory / key
        ensure_dir_exists(path.parent)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(data)


def _read_config(config_path: str | os.PathLike[str]) -> dict[str, Any]:
    path = Path(config_path)
    if not path.exists():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise CacheConfigError(f"cannot parse {path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise CacheConfigError(f"{path} does not hold a mapping")
    return data


def _write_config(config_path: str | os.PathLike[str], data: dict[str, Any]) -> None:
    path = Path(config_path)
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")


def remote_cache_enabled(config_path: str | os.PathLike[str]) -> bool:
    """Tell whether the configuration names both a bucket and a region."""
    provider = CacheProvider.from_mapping(_read_config(config_path).get("cache"))
    return bool(provider.bucket_name and provider.region)


def add_remote_cache(
    config_path: str | os.PathLike[str], bucket_name: str, region: str
) -> None:
    """Record a remote cache bucket and region in the configuration."""
    config = _read_config(config_path)
    CacheProvider.from_mapping(config.get("cache"))
    config["cache"] = CacheProvider(bucket_name=bucket_name, region=region).to_mapping()
    _write_config(config_path, config)


def remove_remote_cache(config_path: str | os.PathLike[str], bucket_name: str) -> None:
    """Clear the remote cache settings; raise if none are configured."""
    config = _read_config(config_path)
    provider = CacheProvider.from_mapping(config.get("cache"))
    if not provider.bucket_name:
        raise CacheConfigError("Error: no cache is configured")
    config["cache"] = CacheProvider().to_mapping()
    _write_config(config_path, config)