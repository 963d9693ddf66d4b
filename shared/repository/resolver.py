"""
URL resolution for raw repository content.

A reference looks like ``https://github.com/<owner>/<name>.git``; splitting
on ``/`` puts the owner at index 3 and ``<name>.git`` at index 4.
"""
from .errors import ConfigurationMissing, InvalidReference

GITHUB_URL = "https://github.com"
RAW_CONTENT_HOST = "https://raw.githubusercontent.com"

_MIN_SEGMENTS = 5
_OWNER_SEGMENT = 3
_NAME_SEGMENT = 4
_SUFFIX_LENGTH = len(".git")


def resolve_raw_url(
    reference: str,
    branch: str,
    file_name: str,
    host: str = RAW_CONTENT_HOST,
) -> str:
    """
    Build the raw-content URL of ``file_name`` on ``branch``.

    Args:
        reference: Repository reference (``https://github.com/owner/name.git``)
        branch: Branch to read from
        file_name: Path relative to the repository root
        host: Raw-content host prefix

    Returns:
        ``<host>/<owner>/<name>/<branch>/<file_name>``

    Raises:
        ConfigurationMissing: reference or branch is empty
        InvalidReference: reference has fewer than five segments
    """
    if not reference or not branch:
        raise ConfigurationMissing()

    segments = reference.split("/")
    if len(segments) < _MIN_SEGMENTS:
        raise InvalidReference()

    owner = segments[_OWNER_SEGMENT]
    name = segments[_NAME_SEGMENT][:-_SUFFIX_LENGTH]
    if not name:
        raise InvalidReference()

    return "/".join([host.rstrip("/"), owner, name, branch, file_name])


def repository_reference(path: str, github_url: str = GITHUB_URL) -> str:
    """Turn an ``owner/name`` path into a reference understood by resolve_raw_url."""
    parts = path.strip("/").split("/") if path else []
    if len(parts) != 2 or not all(parts):
        raise InvalidReference()
    return f"{github_url.rstrip('/')}/{parts[0]}/{parts[1]}.git"
