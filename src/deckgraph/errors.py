"""Exception taxonomy for the deckgraph object model.

- PackageCorruptError: a required part or relationship is missing or
  malformed. Fatal; there is no recovery.
- DanglingRelationshipError: a relationship id does not resolve to a part.
- NotPresentError: an optional element (e.g. a background image) is absent.
  Callers are expected to check the matching presence predicate first.
- InvalidArgumentError: out-of-range positions, unknown identifiers,
  duplicate targets. Raised before any mutation happens.
- UnsupportedOperationError: an operation that is intentionally not
  implemented (rendering, HTML/JSON export).
"""


class DeckGraphError(Exception):
    """Base class for every error raised by deckgraph."""


class PackageCorruptError(DeckGraphError):
    """A required part or relationship is missing or malformed."""


class DanglingRelationshipError(PackageCorruptError):
    """A relationship id does not resolve to an existing part."""

    def __init__(self, source: str, rId: str) -> None:
        self.source = str(source)
        self.rId = rId
        super().__init__(f"relationship {rId!r} of {self.source} does not resolve to a part")


class NotPresentError(DeckGraphError):
    """An optional element is absent."""


class InvalidArgumentError(DeckGraphError, ValueError):
    """An argument is out of range or otherwise malformed."""


class UnsupportedOperationError(DeckGraphError, NotImplementedError):
    """The operation exists in the API but is intentionally not implemented."""
