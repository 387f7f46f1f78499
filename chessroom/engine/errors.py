from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .board import Color


class EngineError(Exception):
    """Base class for errors raised by the rules engine."""


class FenError(EngineError, ValueError):
    """A position encoding could not be decoded."""


class KingNotFoundError(EngineError):
    """The one-king-per-color invariant does not hold for a position."""

    def __init__(self, color: "Color") -> None:
        super().__init__(f"no {color.name.lower()} king on board")
        self.color = color
