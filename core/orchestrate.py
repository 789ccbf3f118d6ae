"""Run a package update across every discovered manifest."""

import json
from pathlib import Path

from .commands import PackageManagerRunner
from .errors import ManifestNotFound
from .locate import DEFAULT_IGNORED_DIRS, find_manifests, search_roots
from .models import UpdateRequest, UpdateSummary
from .paths import get_absolute_paths
from .reporting import Reporter
from .resolve_node import NodeResolver, is_exact_version
from .update import ManifestUpdater


async def update_package(
    request: UpdateRequest,
    *,
    root: Path,
    resolver: NodeResolver,
    runner: PackageManagerRunner,
    reporter: Reporter,
) -> UpdateSummary:
    """Update ``request.package_name`` in every manifest under ``root``.

    The target version is resolved once before any manifest is touched.
    Manifests are processed one after another; a failing manifest is recorded
    in the summary and does not stop the others.

    Raises:
        ManifestNotFound: If no package.json is found
        RegistryQueryError: If the latest version cannot be looked up
    """
    reporter.warn(
        f"Updating package {request.package_name} with options {json.dumps(request.describe())}"
    )

    if not is_exact_version(request.new_version):
        reporter.info("No valid version provided; defaulting to latest...")
    target_version = await resolver.resolve_version(request.package_name, request.new_version)

    ignored = [str(path / "**") for path in get_absolute_paths(request.exclude_dirs, root)]
    ignored += [f"**/{name}/**" for name in sorted(DEFAULT_IGNORED_DIRS)]
    reporter.warn(f"Ignoring the following file paths for update: {','.join(ignored)}...")
    for search_root in search_roots(root, request.include_dirs):
        reporter.info(f"Searching for package.json files in {search_root / '**' / 'package.json'}...")

    files = find_manifests(root, request.include_dirs, request.exclude_dirs)
    if not files:
        raise ManifestNotFound("No package.json files found in the searched directories.")

    resolved = request.with_version(target_version)
    updater = ManifestUpdater(runner, reporter)
    summary = UpdateSummary(package_name=request.package_name, target_version=target_version)
    for path in files:
        summary.outcomes.append(updater.update_one(resolved, path))

    reporter.success(f"Completed update for {summary.discovered} discovered package.json file(s)")
    return summary


async def run(
    request: UpdateRequest,
    *,
    root: Path,
    resolver: NodeResolver | None = None,
    runner: PackageManagerRunner | None = None,
    reporter: Reporter | None = None,
) -> UpdateSummary:
    """Run an update inside a single failure boundary.

    Errors are reported and returned on the summary instead of raised.
    """
    reporter = reporter or Reporter()
    try:
        return await update_package(
            request,
            root=root,
            resolver=resolver or NodeResolver(),
            runner=runner or PackageManagerRunner(request.package_manager),
            reporter=reporter,
        )
    except Exception as e:
        reporter.failure(f"Failed to update package: {e}")
        return UpdateSummary(package_name=request.package_name, error=str(e))
