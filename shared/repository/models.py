"""
Repository data model.

RepositoryConfiguration is the (ref, branch) pair owned by the config
service; FetchOutcome is the per-file slot record written by the hashing
engine.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import RepositoryError


@dataclass(frozen=True)
class RepositoryConfiguration:
    """
    Snapshot of the current repository reference and branch.

    Frozen so a reader holding one instance always sees a consistent pair,
    even while the store is being overwritten.
    """
    reference: str = ""
    branch: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.reference) and bool(self.branch)

    def to_dict(self) -> Dict[str, str]:
        return {"gitRef": self.reference, "branch": self.branch}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepositoryConfiguration":
        reference = data.get("gitRef") or ""
        branch = data.get("branch") or ""
        if not isinstance(reference, str) or not isinstance(branch, str):
            raise TypeError("gitRef and branch must be strings")
        return cls(reference=reference, branch=branch)


@dataclass
class FetchOutcome:
    """Result of one per-file resolve → fetch → digest pipeline."""
    index: int
    file_name: str
    digest: Optional[str] = None
    error: Optional[RepositoryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.digest is not None
