"""Data shapes returned by the registry's JSON API."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass
class PackageSummary:
    """Single-row summary used by the browse page and package listing."""

    org: str
    name: str
    summary: str | None = None
    latest: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class VersionSummary:
    """One row of a package's version history."""

    version: str
    abi: int
    sha256: str
    size_bytes: int
    license: str | None = None
    yanked: int = 0
    published_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class PackageDetail:
    """Package detail including every published version."""

    org: str
    name: str
    summary: str | None = None
    versions: list[VersionSummary] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class VersionDetail:
    """Full version detail, as used by the version API and the download endpoint."""

    org_name: str
    pkg_name: str
    version: str
    abi: int
    sha256: str
    storage_key: str
    size_bytes: int
    license: str | None = None
    readme_md: str | None = None
    dependencies: str | None = None
    capabilities: str | None = None
    yanked: int = 0
    yanked_reason: str | None = None
    published_at: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)