"""Reference resolution entities."""

from __future__ import annotations

from dataclasses import dataclass, field


class UnresolvedReferenceError(Exception):
    """Raised when a ``$ref`` does not resolve to an existing node of the document."""

    def __init__(
        self,
        reference: str,
        *,
        definition: str | None = None,
        request_context: str | None = None,
    ) -> None:
        self.reference = reference
        self.definition = definition
        self.request_context = request_context
        message = f"The reference {reference} does not exist."
        if definition:
            message += f" It is used by definition {definition}."
        if request_context:
            message += f" Source: {request_context}."
        super().__init__(message)


@dataclass
class RefUsage:
    """Occurrence counters for one ``$ref`` string."""

    count: int = 0
    all_of_count: int = 0

    @property
    def is_structural_only(self) -> bool:
        """Return True when every occurrence is an ``allOf[0]`` extension link."""
        return self.count == self.all_of_count


@dataclass
class ReferenceIndex:
    """All ``$ref`` strings found in a JSON value, keyed by reference."""

    refs: dict[str, RefUsage] = field(default_factory=dict)

    def usage(self, reference: str) -> RefUsage | None:
        """Return the counters for ``reference`` or None when it never occurs."""
        return self.refs.get(reference)
