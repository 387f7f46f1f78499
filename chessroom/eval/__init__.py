"""Move scoring heuristics for the computer opponent.

Pure, deterministic, and side-effect free. Scores are additive; higher is
better for the side making the move.
"""

from __future__ import annotations

from typing import Dict, Final, FrozenSet, Tuple

from chessroom.engine.board import Color, Piece, PieceKind, str_to_square
from chessroom.engine.game import GameState
from chessroom.engine.move import Move
from chessroom.engine.movegen import is_square_attacked, piece_moves
from chessroom.engine.rules import is_checkmate, is_in_check


# Material values in pawns
MATERIAL: Final[Dict[PieceKind, int]] = {
    PieceKind.PAWN: 1,
    PieceKind.KNIGHT: 3,
    PieceKind.BISHOP: 3,
    PieceKind.ROOK: 5,
    PieceKind.QUEEN: 9,
    PieceKind.KING: 0,
}

MATE_BONUS: Final = 1000.0
CHECK_BONUS: Final = 50.0
CENTER_BONUS: Final = 1.0
EXTENDED_CENTER_BONUS: Final = 0.5
KING_SAFETY_BONUS: Final = 2.0
DEVELOPMENT_BONUS: Final = 0.3
THREAT_BONUS: Final = 1.5
EXPOSURE_PENALTY: Final = 1.0

TRUE_CENTER: Final[FrozenSet[int]] = frozenset(str_to_square(s) for s in ("d4", "d5", "e4", "e5"))

# Back-rank starting squares per non-pawn piece kind, as file indices
_HOME_FILES: Final[Dict[PieceKind, Tuple[int, ...]]] = {
    PieceKind.ROOK: (0, 7),
    PieceKind.KNIGHT: (1, 6),
    PieceKind.BISHOP: (2, 5),
    PieceKind.QUEEN: (3,),
    PieceKind.KING: (4,),
}


def material_value(piece: Piece) -> int:
    return MATERIAL[piece.kind]


def is_center_square(sq: int) -> bool:
    return sq in TRUE_CENTER


def is_extended_center(sq: int) -> bool:
    """Files c–f on ranks 3–6; includes the four true-center squares."""
    f, r = sq % 8, sq // 8
    return 2 <= f <= 5 and 2 <= r <= 5


def is_home_square(piece: Piece, sq: int) -> bool:
    """Whether ``sq`` is one of ``piece``'s starting back-rank squares."""
    files = _HOME_FILES.get(piece.kind)
    if files is None:
        return False
    return sq // 8 == piece.color.home_rank and sq % 8 in files


def _attacked_enemies(state: GameState, sq: int, color: Color) -> FrozenSet[int]:
    return frozenset(m.to_sq for m in piece_moves(sq, state, color) if m.captured is not None)


def score_breakdown(move: Move, state: GameState) -> Dict[str, float]:
    """Return the non-zero scoring terms for ``move`` played from ``state``.

    A move that mates short-circuits to ``{"mate": MATE_BONUS}``.
    """
    color = move.piece.color
    enemy = color.opponent
    after = state.apply(move)

    if is_checkmate(after, enemy):
        return {"mate": MATE_BONUS}

    terms: Dict[str, float] = {}
    if is_in_check(after, enemy):
        terms["check"] = CHECK_BONUS
    if move.captured is not None and MATERIAL[move.captured.kind]:
        terms["material"] = float(MATERIAL[move.captured.kind])

    if is_center_square(move.to_sq):
        terms["center"] = CENTER_BONUS
    elif is_extended_center(move.to_sq):
        terms["center"] = EXTENDED_CENTER_BONUS

    destination_attacked = is_square_attacked(after.board, move.to_sq, enemy)
    if move.piece.kind is PieceKind.KING and not destination_attacked:
        terms["king_safety"] = KING_SAFETY_BONUS
    if is_home_square(move.piece, move.from_sq):
        terms["development"] = DEVELOPMENT_BONUS

    # Only castling-free states are needed to list what the piece attacks
    before_view = GameState.for_side(state.board, color)
    after_view = GameState.for_side(after.board, color)
    if _attacked_enemies(after_view, move.to_sq, color) - _attacked_enemies(
        before_view, move.from_sq, color
    ):
        terms["threat"] = THREAT_BONUS

    if destination_attacked:
        terms["exposure"] = -EXPOSURE_PENALTY
    return terms


def evaluate_move(move: Move, state: GameState) -> float:
    """Score ``move`` for the side playing it; higher is better."""
    return sum(score_breakdown(move, state).values())
