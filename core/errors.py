"""Error types raised by the package updater."""


class UpdaterError(Exception):
    """Base class for all package updater errors."""


class InvalidConfiguration(UpdaterError):
    """The update request is missing or carries an unsupported value."""


class RegistryQueryError(UpdaterError):
    """The latest published version of a package could not be determined."""


class ManifestNotFound(UpdaterError):
    """No package.json files were found under the searched directories."""


class InvalidManifest(UpdaterError):
    """A package.json file could not be read or is not a JSON object."""


class ManifestWriteError(UpdaterError):
    """An updated package.json file could not be written back to disk."""


class ExternalCommandError(UpdaterError):
    """An install or test command exited unsuccessfully."""
