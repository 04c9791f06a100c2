"""Release pipeline: commit classification, versioning, manifests, notes, publishing."""

from .errors import ReleaseError, ReleaseErrorKind
from .github import GitHubClient
from .model import ReleaseOutcome, ReleaseRequest, ReleaseResult, ReleaseType
from .service import ReleaseOrchestrator, ReleaseState

__all__ = [
    "GitHubClient",
    "ReleaseError",
    "ReleaseErrorKind",
    "ReleaseOrchestrator",
    "ReleaseOutcome",
    "ReleaseRequest",
    "ReleaseResult",
    "ReleaseState",
    "ReleaseType",
]
