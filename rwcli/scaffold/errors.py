"""Errors raised by the project scaffolding pipeline.

Every stage raises one of these instead of exiting, so the CLI can decide
presentation and exit code in one place.
"""


class ScaffoldError(Exception):
    """Base class for scaffolding failures."""
    pass


class RemoteUnavailable(ScaffoldError):
    """Raised when the release host cannot be reached or answers with an error."""
    pass


class NoReleaseFound(ScaffoldError):
    """Raised when the template repository has no published release."""
    pass


class AssetNotFound(ScaffoldError):
    """Raised when a release does not publish the expected template asset.

    This points at a publishing or configuration mismatch and is never retried.
    """

    def __init__(self, asset_name: str, release_tag: str, available=()):
        self.asset_name = asset_name
        self.release_tag = release_tag
        self.available = tuple(available)
        message = f"Template asset '{asset_name}' not found in release {release_tag}"
        if self.available:
            message += f" (available: {', '.join(self.available)})"
        super().__init__(message)


class NotADirectory(ScaffoldError):
    """Raised when the target path exists but is not a directory."""

    def __init__(self, path):
        self.path = path
        super().__init__(f"Target path is not a directory: {path}")


class DirectoryNotEmpty(ScaffoldError):
    """Raised when the target directory has contents and overwrite was not requested."""

    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Target directory is not empty: {path}\n"
            f"Choose another path or pass --overwrite to write into it anyway."
        )


class ExtractionFailed(ScaffoldError):
    """Raised when a template archive cannot be materialized.

    Files already written are left in place.
    """
    pass


class VersionControlInitFailed(ScaffoldError):
    """Raised when git init/add/commit fails. Treated as a soft failure."""
    pass


class ToolchainMissing(ScaffoldError):
    """Raised when a required executable (node, yarn, git) cannot be found."""
    pass
