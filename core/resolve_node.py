"""Node.js package version resolution."""

import asyncio
import re
from urllib.parse import quote

import httpx
from packaging.version import InvalidVersion, Version

from .errors import RegistryQueryError

EXACT_VERSION_PATTERN = re.compile(r"[0-9]+\.[0-9]+\.[0-9]+")


def is_exact_version(value: str | None) -> bool:
    """Check whether ``value`` is a bare MAJOR.MINOR.PATCH version."""
    return bool(value) and EXACT_VERSION_PATTERN.fullmatch(value) is not None


def strip_range_prefix(version: str) -> str:
    """Drop a single leading ``^`` or ``~`` from a version range."""
    if version[:1] in ("^", "~"):
        return version[1:]
    return version


def calculate_semver_delta(current_version: str | None, new_version: str) -> str:
    """Classify an update as "major", "minor", "patch" or "unknown".

    Args:
        current_version: Version currently in the manifest (range prefix allowed)
        new_version: Version being written

    Returns:
        Semver delta of the upgrade; downgrades and unparseable versions are "unknown"
    """
    if not current_version:
        return "unknown"

    try:
        old_ver = Version(strip_range_prefix(current_version))
        new_ver = Version(new_version)
    except InvalidVersion:
        return "unknown"

    if new_ver > old_ver:
        if new_ver.major > old_ver.major:
            return "major"
        elif new_ver.minor > old_ver.minor:
            return "minor"
        elif new_ver.micro > old_ver.micro:
            return "patch"

    return "unknown"


class NodeResolver:
    """Resolver for npm package versions."""

    def __init__(
        self,
        registry_url: str | None = None,
        timeout: float = 30.0,
        npm_binary: str = "npm",
    ):
        """Initialize Node resolver.

        Args:
            registry_url: Registry base URL to query over HTTP; when unset the
                npm CLI is asked instead
            timeout: Lookup timeout in seconds
            npm_binary: Executable used for ``npm view``
        """
        self.registry_url = registry_url.rstrip("/") if registry_url else None
        self.timeout = timeout
        self.npm_binary = npm_binary

    async def resolve_version(self, package_name: str, requested_version: str | None) -> str:
        """Return the requested version, or the latest one when it is missing or invalid.

        Ranges (``^1.2.3``) and partial versions (``1.2``) count as not provided.
        """
        if is_exact_version(requested_version):
            return requested_version
        return await self.get_latest_version(package_name)

    async def get_latest_version(self, package_name: str) -> str:
        """Get the latest published version of a package.

        Raises:
            RegistryQueryError: If the lookup fails or returns nothing
        """
        if self.registry_url:
            version = await self._fetch_latest_from_registry(package_name)
        else:
            version = await self._query_npm_view(package_name)

        version = version.strip()
        if not version:
            raise RegistryQueryError(f"No published version found for package {package_name}")
        return version

    async def _query_npm_view(self, package_name: str) -> str:
        """Ask the npm CLI for the package's current version."""
        if package_name.startswith("-"):
            raise RegistryQueryError(f"Invalid package name: {package_name}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.npm_binary,
                "view",
                package_name,
                "version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise RegistryQueryError(f"Could not run {self.npm_binary} view for {package_name}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise RegistryQueryError(f"Timeout querying latest version of {package_name}") from None

        if process.returncode != 0:
            message = stderr.decode("utf-8", errors="replace").strip()
            raise RegistryQueryError(
                f"Failed to query latest version of {package_name}: {message or f'exit code {process.returncode}'}"
            )

        return stdout.decode("utf-8", errors="replace")

    async def _fetch_latest_from_registry(self, package_name: str) -> str:
        """Fetch the ``latest`` dist-tag document from the registry."""
        url = f"{self.registry_url}/{quote(package_name, safe='@')}/latest"

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                if response.status_code == 404:
                    raise RegistryQueryError(f"Package {package_name} not found in registry")
                response.raise_for_status()
                metadata = response.json()

        except httpx.TimeoutException as e:
            raise RegistryQueryError(f"Timeout fetching metadata for {package_name}") from e
        except httpx.HTTPStatusError as e:
            raise RegistryQueryError(f"HTTP error fetching {package_name}: {e}") from e
        except httpx.HTTPError as e:
            raise RegistryQueryError(f"Network error fetching {package_name}: {e}") from e
        except ValueError as e:
            raise RegistryQueryError(f"Invalid registry response for {package_name}: {e}") from e

        version = metadata.get("version") if isinstance(metadata, dict) else None
        if not isinstance(version, str):
            raise RegistryQueryError(f"Registry response for {package_name} has no version")
        return version
