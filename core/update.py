"""Update a single package.json manifest."""

from pathlib import Path

from .commands import PackageManagerRunner
from .errors import ExternalCommandError, InvalidManifest, ManifestWriteError
from .models import DependencySet, FileOutcome, SkipReason, UpdateRequest
from .parse_node import read_manifest, write_manifest
from .reporting import Reporter
from .resolve_node import calculate_semver_delta, strip_range_prefix


def is_version_matching(current_version: str, target_version: str) -> bool:
    """Compare a manifest range against a bare version, ignoring ``^``/``~``."""
    return strip_range_prefix(current_version) == target_version


class ManifestUpdater:
    """Rewrites the target package's version in one manifest at a time."""

    def __init__(self, runner: PackageManagerRunner, reporter: Reporter | None = None):
        self.runner = runner
        self.reporter = reporter or Reporter(quiet=True)

    def update_one(self, request: UpdateRequest, path: Path) -> FileOutcome:
        """Update ``request.package_name`` to ``request.new_version`` in ``path``.

        The request must already carry the resolved target version. Parse,
        write and install/test failures are returned as a failed outcome so
        the remaining manifests can still be processed.
        """
        package_name = request.package_name
        target_version = request.new_version

        try:
            manifest = read_manifest(path)
        except InvalidManifest as e:
            self.reporter.failure(str(e))
            return FileOutcome.failed(path, e)

        dependencies = DependencySet.from_manifest(manifest.data)
        section = dependencies.section_for(package_name)
        if section is None:
            self.reporter.warn(f"Manifest at {path} does not contain the package {package_name}")
            return FileOutcome.skipped(path, SkipReason.PACKAGE_NOT_LISTED)

        current_version = dependencies.current_version(package_name)
        self.reporter.info(
            f"Versions in file {path} [current | update]: [{current_version} | {target_version}]"
        )
        details = {
            "section": section,
            "previous_version": current_version,
            "new_version": f"^{target_version}",
        }

        if is_version_matching(current_version, target_version):
            self.reporter.warn(f"Manifest at {path} matched update version; skipping update...")
            return FileOutcome.skipped(
                path, SkipReason.ALREADY_UP_TO_DATE, section=section, previous_version=current_version
            )

        # Assigning an existing key keeps its position in the section
        manifest.data[section][package_name] = details["new_version"]
        try:
            write_manifest(manifest)
        except ManifestWriteError as e:
            self.reporter.failure(str(e))
            return FileOutcome.failed(path, e, section=section, previous_version=current_version)

        self.reporter.success(
            f"Updated {package_name} to ^{target_version} in package.json of file {path}"
        )
        details["semver_delta"] = calculate_semver_delta(current_version, target_version)

        if request.installs:
            try:
                self._install_and_test(request, path)
            except ExternalCommandError as e:
                self.reporter.failure(str(e))
                return FileOutcome.failed(path, e, **details)

        return FileOutcome.updated(path, **details)

    def _install_and_test(self, request: UpdateRequest, path: Path) -> None:
        directory = path.parent

        self.reporter.info(f"Installing dependencies in {path}...")
        self.runner.run_install(directory)
        self.reporter.success(f"Install completed in {path}")

        if request.test:
            self.reporter.info(f"Running tests in {path}...")
            self.runner.run_test(directory)
            self.reporter.success(f"Tests passed in {path}")
