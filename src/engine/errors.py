from __future__ import annotations


class RulesInvariantError(RuntimeError):
    """Raised when a caller breaks an engine precondition.

    Illegal move requests are not errors (they return ``False``); this class
    covers states that public operations never produce.
    """


class EmptySquareError(RulesInvariantError):
    """A move was applied from a square with no piece on it."""


class MissingKingError(RulesInvariantError):
    """The side being tested for check has no king on the board."""
