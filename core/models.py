"""Core data models for the package updater."""

from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import InvalidConfiguration
from .paths import parse_comma_separated_list

RUNTIME_SECTION = "dependencies"
DEV_SECTION = "devDependencies"


class PackageManager(str, Enum):
    """Supported package managers."""

    NPM = "npm"
    YARN = "yarn"

    @classmethod
    def parse(cls, value: "str | PackageManager") -> "PackageManager":
        """Parse a user supplied package manager name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        selected = str(value or "").strip().lower()
        try:
            return cls(selected)
        except ValueError:
            options = ", ".join(f"'{manager.value}'" for manager in cls)
            raise InvalidConfiguration(
                f"Unrecognized package manager selected: '{value}' (options are: {options})"
            ) from None


@dataclass(frozen=True)
class UpdateRequest:
    """A validated request to update one package across manifests."""

    package_name: str
    new_version: str | None = None
    include_dirs: tuple[str, ...] = ()
    exclude_dirs: tuple[str, ...] = ()
    apply: bool = False
    test: bool = False
    package_manager: PackageManager = PackageManager.NPM

    def __post_init__(self):
        name = (self.package_name or "").strip()
        if not name:
            raise InvalidConfiguration("A package name is required")
        if name.startswith("-"):
            raise InvalidConfiguration(f"Invalid package name: {name}")
        object.__setattr__(self, "package_name", name)
        object.__setattr__(self, "package_manager", PackageManager.parse(self.package_manager))
        object.__setattr__(self, "include_dirs", tuple(self.include_dirs or ()))
        object.__setattr__(self, "exclude_dirs", tuple(self.exclude_dirs or ()))

    @classmethod
    def from_options(
        cls,
        package_name: str,
        new_version: str | None = None,
        include_dirs: str | None = None,
        exclude_dirs: str | None = None,
        apply: bool = False,
        test: bool = False,
        package_manager: str = "npm",
    ) -> "UpdateRequest":
        """Build a request from raw command line values."""
        return cls(
            package_name=package_name,
            new_version=new_version,
            include_dirs=tuple(parse_comma_separated_list(include_dirs)) if include_dirs else (),
            exclude_dirs=tuple(parse_comma_separated_list(exclude_dirs)) if exclude_dirs else (),
            apply=apply,
            test=test,
            package_manager=package_manager,
        )

    @property
    def installs(self) -> bool:
        """Whether an install runs after a manifest is rewritten (test implies apply)."""
        return self.apply or self.test

    def with_version(self, version: str) -> "UpdateRequest":
        """Return a copy of this request targeting ``version``."""
        return replace(self, new_version=version)

    def describe(self) -> dict[str, Any]:
        return {
            "newVersion": self.new_version,
            "includeDirs": list(self.include_dirs),
            "excludeDirs": list(self.exclude_dirs),
            "apply": self.apply,
            "test": self.test,
            "packageManager": self.package_manager.value,
        }


@dataclass
class ManifestFile:
    """A parsed package.json file."""

    path: Path
    data: dict[str, Any]

    @property
    def directory(self) -> Path:
        return self.path.parent


@dataclass(frozen=True)
class DependencySet:
    """Runtime and dev dependency maps of a manifest."""

    runtime: dict[str, Any]
    dev: dict[str, Any]

    @classmethod
    def from_manifest(cls, data: dict[str, Any]) -> "DependencySet":
        runtime = data.get(RUNTIME_SECTION)
        dev = data.get(DEV_SECTION)
        return cls(
            runtime=runtime if isinstance(runtime, dict) else {},
            dev=dev if isinstance(dev, dict) else {},
        )

    def section_for(self, package_name: str) -> str | None:
        """Name of the section holding the package, runtime first."""
        if package_name in self.runtime:
            return RUNTIME_SECTION
        if package_name in self.dev:
            return DEV_SECTION
        return None

    def current_version(self, package_name: str) -> str | None:
        section = self.section_for(package_name)
        if section is None:
            return None
        mapping = self.runtime if section == RUNTIME_SECTION else self.dev
        return str(mapping[package_name])


class OutcomeStatus(str, Enum):
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"


class SkipReason(str, Enum):
    PACKAGE_NOT_LISTED = "package-not-listed"
    ALREADY_UP_TO_DATE = "already-up-to-date"


@dataclass
class FileOutcome:
    """Result of processing a single manifest."""

    path: Path
    status: OutcomeStatus
    reason: SkipReason | None = None
    error: str | None = None
    section: str | None = None
    previous_version: str | None = None
    new_version: str | None = None
    semver_delta: str = "unknown"  # major, minor, patch, unknown

    @classmethod
    def updated(cls, path: Path, **details) -> "FileOutcome":
        return cls(path=path, status=OutcomeStatus.UPDATED, **details)

    @classmethod
    def skipped(cls, path: Path, reason: SkipReason, **details) -> "FileOutcome":
        return cls(path=path, status=OutcomeStatus.SKIPPED, reason=reason, **details)

    @classmethod
    def failed(cls, path: Path, error: Exception | str, **details) -> "FileOutcome":
        return cls(path=path, status=OutcomeStatus.FAILED, error=str(error), **details)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "status": self.status.value,
            "reason": self.reason.value if self.reason else None,
            "error": self.error,
            "section": self.section,
            "previous_version": self.previous_version,
            "new_version": self.new_version,
            "semver_delta": self.semver_delta,
        }


@dataclass
class UpdateSummary:
    """Aggregate result of an update run."""

    package_name: str
    target_version: str | None = None
    outcomes: list[FileOutcome] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def discovered(self) -> int:
        return len(self.outcomes)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status == status)

    @property
    def updated(self) -> int:
        return self._count(OutcomeStatus.UPDATED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)

    def to_dict(self) -> dict[str, Any]:
        return {
            "package": self.package_name,
            "target_version": self.target_version,
            "error": self.error,
            "totals": {
                "discovered": self.discovered,
                "updated": self.updated,
                "skipped": self.skipped,
                "failed": self.failed,
            },
            "files": [outcome.to_dict() for outcome in self.outcomes],
        }
