from __future__ import annotations


class NotFoundError(LookupError):
    """A project, version, user or session id that does not exist."""


class LimitExceededError(ValueError):
    """Plan project limit or credit balance exhausted."""


class ConflictError(ValueError):
    """Unique value already taken (subdomain, email)."""


class GenerationError(RuntimeError):
    """The generation collaborator failed or returned unusable content."""


class FormattingError(ValueError):
    """A pretty-printer rejected a file; the file content is left as it was."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Could not format {path}: {reason}")
        self.path = path
        self.reason = reason
