"""Node.js package.json parsing and serialization."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from .errors import InvalidManifest, ManifestWriteError
from .models import ManifestFile


def parse_package_json(content: str) -> dict[str, Any]:
    """Parse package.json content.

    Args:
        content: The package.json file content

    Returns:
        Parsed manifest object, key order preserved

    Raises:
        InvalidManifest: If the content is not a JSON object
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise InvalidManifest(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InvalidManifest("Manifest must be a JSON object")

    return data


def read_manifest(path: Path) -> ManifestFile:
    """Read and parse the manifest at ``path``."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidManifest(f"Failed to read {path}: {e}") from e

    try:
        data = parse_package_json(content)
    except InvalidManifest as e:
        raise InvalidManifest(f"Manifest at {path} is invalid: {e}") from e

    return ManifestFile(path=path, data=data)


def dump_package_json(data: dict[str, Any]) -> str:
    """Serialize a manifest with 2-space indentation and a trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_manifest(manifest: ManifestFile) -> None:
    """Overwrite the manifest file atomically.

    The content goes to a temporary file in the same directory which is then
    renamed over the original. The temporary file never outlives the call.
    """
    try:
        payload = dump_package_json(manifest.data).encode("utf-8")
    except UnicodeEncodeError as e:
        raise ManifestWriteError(f"Failed to encode {manifest.path}: {e}") from e

    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=".package.json.", suffix=".tmp", dir=manifest.directory
        )
        with os.fdopen(fd, "wb") as handle:
            handle.write(payload)
        # mkstemp creates files as 0600; keep the original permissions
        os.chmod(tmp_name, manifest.path.stat().st_mode & 0o777)
        os.replace(tmp_name, manifest.path)
        tmp_name = None
    except OSError as e:
        raise ManifestWriteError(f"Failed to write {manifest.path}: {e}") from e
    finally:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
