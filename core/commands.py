"""Install and test commands run through the selected package manager."""

import subprocess
from pathlib import Path

from .errors import ExternalCommandError
from .models import PackageManager

INSTALL_COMMANDS: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("npm", "install"),
    PackageManager.YARN: ("yarn", "install"),
}

# Projects without any test files must not fail the run
TEST_COMMANDS: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("npm", "test", "--", "--passWithNoTests"),
    PackageManager.YARN: ("yarn", "test", "--passWithNoTests"),
}

_OUTPUT_TAIL_LINES = 20


def _output_tail(*streams: str | bytes | None) -> str:
    """Last lines of the first non-empty stream, for error messages."""
    for stream in streams:
        if isinstance(stream, bytes):
            stream = stream.decode("utf-8", errors="replace")
        if stream and stream.strip():
            return "\n".join(stream.strip().splitlines()[-_OUTPUT_TAIL_LINES:])
    return ""


class PackageManagerRunner:
    """Runs install/test commands in a project directory.

    Commands block until they finish. ``timeout`` bounds each command in
    seconds; ``None`` waits indefinitely.
    """

    def __init__(self, package_manager: PackageManager | str = PackageManager.NPM, timeout: float | None = None):
        self.package_manager = PackageManager.parse(package_manager)
        self.timeout = timeout

    def run_install(self, directory: Path) -> None:
        self._run(INSTALL_COMMANDS[self.package_manager], directory)

    def run_test(self, directory: Path) -> None:
        self._run(TEST_COMMANDS[self.package_manager], directory)

    def _run(self, args: tuple[str, ...], directory: Path) -> subprocess.CompletedProcess:
        command = " ".join(args)
        try:
            return subprocess.run(
                list(args),
                cwd=directory,
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            details = _output_tail(e.stderr, e.stdout)
            message = f"'{command}' failed in {directory} with exit code {e.returncode}"
            raise ExternalCommandError(f"{message}: {details}" if details else message) from e
        except subprocess.TimeoutExpired as e:
            raise ExternalCommandError(
                f"'{command}' timed out after {self.timeout} seconds in {directory}"
            ) from e
        except OSError as e:
            raise ExternalCommandError(f"Could not run '{command}' in {directory}: {e}") from e
