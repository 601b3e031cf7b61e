"""
DI-specific error types with rich diagnostics.
"""

from typing import List, Optional, Any


class DIError(Exception):
    """Base exception for DI errors."""
    pass


class ProviderNotFoundError(DIError):
    """Provider not found for requested token."""

    def __init__(
        self,
        token: str,
        tag: Optional[str] = None,
        candidates: Optional[List[str]] = None,
    ):
        self.token = token
        self.tag = tag
        self.candidates = candidates or []

        msg = f"No provider found for token={token}"
        if tag:
            msg += f" (tag={tag})"

        if self.candidates:
            msg += "\n\nCandidates found:"
            for candidate in self.candidates:
                msg += f"\n  - {candidate}"

        super().__init__(msg)


class DuplicateProviderError(DIError):
    """A different provider is already registered for the token."""

    def __init__(self, token: str, tag: Optional[str], existing: Any):
        self.token = token
        self.tag = tag
        self.existing = existing

        msg = f"Provider for {token}"
        if tag:
            msg += f" (tag={tag})"
        msg += f" already registered: {existing.meta.name}"

        super().__init__(msg)


class AmbiguousProviderError(DIError):
    """Multiple providers share the requested name."""

    def __init__(self, name: str, tokens: List[str]):
        self.name = name
        self.tokens = tokens

        msg = f"Ambiguous provider name={name!r}. Registered under:"
        for token in tokens:
            msg += f"\n  - {token}"

        super().__init__(msg)
