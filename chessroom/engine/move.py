from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .board import Piece, PieceKind, square_to_str, str_to_square


PROMOTION_KINDS: Tuple[PieceKind, ...] = (
    PieceKind.QUEEN,
    PieceKind.ROOK,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
)
_PROMOTION_BY_CHAR = {k.value: k for k in PROMOTION_KINDS}


@dataclass(frozen=True)
class Move:
    """A move as a value; applying it never mutates the source position.

    Attributes:
        from_sq (int): Origin square index (0-based).
        to_sq (int): Destination square index (0-based).
        piece (Piece): The moving piece.
        captured (Optional[Piece]): Piece removed by the move, if any.
        promotion (Optional[PieceKind]): Kind the pawn becomes on the last rank.
        castling (bool): King move that also relocates a rook.
        en_passant (bool): Pawn capture of a pawn that just double-pushed.
        notation (str): Advisory SAN-style text; ignored by equality.
    """

    from_sq: int
    to_sq: int
    piece: Piece
    captured: Optional[Piece] = None
    promotion: Optional[PieceKind] = None
    castling: bool = False
    en_passant: bool = False
    notation: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if self.notation == "":
            object.__setattr__(self, "notation", describe(self))

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_uci(self) -> str:
        """Serialize the move into long algebraic UCI form.

        Returns:
            str: Move encoded like ``"e2e4"`` or ``"e7e8q"``.
        """
        promo = self.promotion.value if self.promotion is not None else ""
        return square_to_str(self.from_sq) + square_to_str(self.to_sq) + promo

    def same_action(self, other: "Move") -> bool:
        """Whether ``other`` moves the same piece between the same squares."""
        return (
            self.from_sq == other.from_sq
            and self.to_sq == other.to_sq
            and self.piece == other.piece
            and self.promotion == other.promotion
        )


def describe(move: Move) -> str:
    """Build SAN-style text for ``move`` (no check suffix, no disambiguation)."""
    if move.castling:
        return "O-O" if move.to_sq % 8 == 6 else "O-O-O"
    dest = square_to_str(move.to_sq)
    if move.piece.kind is PieceKind.PAWN:
        text = square_to_str(move.from_sq)[0] + "x" + dest if move.is_capture else dest
        if move.promotion is not None:
            text += "=" + move.promotion.letter
        return text
    return move.piece.kind.letter + ("x" if move.is_capture else "") + dest


def parse_uci(uci: str) -> Tuple[int, int, Optional[PieceKind]]:
    """Parse a UCI move string.

    Args:
        uci (str): Move encoded in long algebraic notation (e.g. ``"e2e4"``).

    Returns:
        tuple: ``(from_sq, to_sq, promotion)``; the moving piece is resolved
            against a position by the caller.

    Raises:
        ValueError: If the string has an invalid length, squares, or promotion
            piece.
    """
    if not isinstance(uci, str) or len(uci) not in (4, 5):
        raise ValueError(f"invalid UCI move length: {uci!r}")
    from_sq = str_to_square(uci[0:2])
    to_sq = str_to_square(uci[2:4])
    promo: Optional[PieceKind] = None
    if len(uci) == 5:
        promo = _PROMOTION_BY_CHAR.get(uci[4].lower())
        if promo is None:
            raise ValueError(f"invalid promotion piece: {uci[4]!r}")
    return from_sq, to_sq, promo


__all__ = [
    "PROMOTION_KINDS",
    "Move",
    "describe",
    "parse_uci",
    "square_to_str",
    "str_to_square",
]
