"""Exception hierarchy for theme update resolution."""

from __future__ import annotations


class UpdaterError(Exception):
    """Base class for update resolution errors."""


class TransportError(UpdaterError):
    """Network failure or timeout while talking to the remote index."""


class NotFoundError(UpdaterError):
    """Remote endpoint answered with a non-200 status or an empty body."""


class MalformedDataError(UpdaterError):
    """Remote payload could not be decoded or lacks a required field."""


class NoReleasesFoundError(UpdaterError):
    """Tag listing is empty or not a list."""


class RenameFailedError(UpdaterError):
    """Extracted source directory could not be renamed to the theme slug."""

    def __init__(self, slug: str, reason: str = "") -> None:
        self.slug = slug
        self.reason = reason
        message = f"Unable to rename the update to match the expected theme directory: {slug}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
