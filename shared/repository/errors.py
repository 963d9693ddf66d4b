"""Error taxonomy for repository resolution, fetching and hashing."""

from typing import Optional


class RepositoryError(Exception):
    """
    Base exception for every request-terminating failure.

    Carries a user-facing ``message`` that the HTTP layer returns verbatim
    in the ``error`` field of a 400 response.
    """

    default_message = "request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ConfigurationMissing(RepositoryError):
    """Raised when the ref or branch has not been set."""
    default_message = "the gitRef or branch is not initialized"


class ConfigurationUnavailable(RepositoryError):
    """Raised when the configuration provider cannot be read."""
    default_message = "The request failed"


class InvalidReference(RepositoryError):
    """Raised when a repository reference cannot be parsed."""
    default_message = "The github ref is invalid"


class FileNotFound(RepositoryError):
    """Raised when the content host reports the file as missing."""
    default_message = "file not found"


class FetchFailed(RepositoryError):
    """Raised on transport-level failures (DNS, connection, timeout)."""
    default_message = "The request failed"


class InvalidPayload(RepositoryError):
    """Raised when a request body cannot be bound."""
    default_message = "bad request"


class EmptyRequest(RepositoryError):
    """Raised when a hash request names no files."""
    default_message = "no files to hash"


class RepositoryNotFound(RepositoryError):
    """Raised when the remote host does not know the repository or branch."""
    default_message = "Repo or branch does not exist"
