"""
Custom exceptions for schemasniff.

Error philosophy:
  - InvalidInputError        → FAIL HARD: the caller handed us something unusable
                               (malformed container selector, unreachable target).
  - NoPatternsFoundError     → FAIL HARD: analysis ran but nothing qualified.
  - DocumentUnavailableError → FAIL HARD: the Document Provider could not produce
                               a tree. Raised before the engine ever runs.

Exclusion selectors are the one lenient spot: a bad one is skipped by the miner
and never surfaces as an exception.
"""

from typing import Optional


class SchemaSniffError(Exception):
    """Base exception for all schemasniff errors."""

    code = "SCHEMASNIFF_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to a plain dict for JSON error output."""
        return {
            "error": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


class InvalidInputError(SchemaSniffError):
    """Raised for malformed selectors or targets that are neither a file nor a URL."""

    code = "INVALID_INPUT"

    @classmethod
    def invalid_selector(cls, selector: str, cause: Exception) -> "InvalidInputError":
        return cls(
            f"Invalid container selector '{selector}': {cause}",
            details={"selector": selector}
        )

    @classmethod
    def invalid_target(cls, target: str) -> "InvalidInputError":
        return cls(
            f"Invalid URL or file path: {target}",
            code="INVALID_URL",
            details={"target": target}
        )


class NoPatternsFoundError(SchemaSniffError):
    """
    Raised when no candidate pattern survives mining, depth filtering and the
    diversity gate, or when a manual container selector matches nothing.

    The message always names the condition that was not met.
    """

    code = "NO_PATTERNS_FOUND"

    def __init__(self, message: str, url: str = "", details: Optional[dict] = None):
        super().__init__(message, details=details)
        self.url = url

    @classmethod
    def below_min_items(cls, url: str, min_items: int) -> "NoPatternsFoundError":
        return cls(
            f"No repeated patterns found with at least {min_items} items on {url or 'document'}",
            url=url,
            details={"min_items": min_items}
        )

    @classmethod
    def too_deep(cls, url: str, max_depth: int, candidates: int) -> "NoPatternsFoundError":
        return cls(
            f"All {candidates} candidate patterns are deeper than max depth {max_depth} "
            f"on {url or 'document'}",
            url=url,
            details={"max_depth": max_depth, "candidates": candidates}
        )

    @classmethod
    def low_diversity(cls, url: str, candidates: int) -> "NoPatternsFoundError":
        return cls(
            f"All {candidates} candidate patterns repeat near-identical text "
            f"(diversity gate) on {url or 'document'}",
            url=url,
            details={"candidates": candidates}
        )

    @classmethod
    def no_container_match(cls, url: str, selector: str) -> "NoPatternsFoundError":
        return cls(
            f"Container selector '{selector}' matched no elements on {url or 'document'}",
            url=url,
            details={"selector": selector, "min_items": 1}
        )


class DocumentUnavailableError(SchemaSniffError):
    """Raised when the Document Provider cannot hand back a usable tree."""

    code = "NAVIGATION_ERROR"

    @classmethod
    def page_load_failed(cls, status: Optional[int], url: str) -> "DocumentUnavailableError":
        return cls(
            f"Failed to load page (status {status if status is not None else 'unknown'}): {url}",
            code="PAGE_LOAD_FAILED",
            details={"status": status, "url": url}
        )

    @classmethod
    def navigation_error(cls, url: str, cause: Exception) -> "DocumentUnavailableError":
        return cls(
            f"Navigation failed for {url}: {cause}",
            details={"url": url}
        )

    @classmethod
    def parse_error(cls, source: str, cause: Exception) -> "DocumentUnavailableError":
        return cls(
            f"Could not parse HTML from {source}: {cause}",
            code="PARSE_ERROR",
            details={"source": source}
        )
