from __future__ import annotations

from typing import TYPE_CHECKING, List

from .board import PieceKind, find_king
from .errors import KingNotFoundError
from .move import Move
from .movegen import is_square_attacked, pseudo_legal_moves

if TYPE_CHECKING:
    from .game import GameState


def leaves_king_in_check(state: "GameState", move: Move) -> bool:
    """Return True if playing ``move`` leaves the mover's own king attacked.

    The move is simulated on a copy of the board (castling rook hop and
    en-passant removal included); the source state is untouched.

    Raises:
        KingNotFoundError: If the mover has no king after the move.
    """
    color = move.piece.color
    after = state.board.apply(move)
    king_sq = find_king(after, color)
    if king_sq is None:
        raise KingNotFoundError(color)
    return is_square_attacked(after, king_sq, color.opponent)


def is_legal(state: "GameState", move: Move) -> bool:
    return not _captures_king(move) and not leaves_king_in_check(state, move)


def legal_moves(state: "GameState") -> List[Move]:
    """Pseudo-legal moves of the side to move that keep its king safe.

    Captures of the enemy king are never legal; they only arise in positions
    where the side not to move is already in check.
    """
    return [
        m
        for m in pseudo_legal_moves(state)
        if not _captures_king(m) and not leaves_king_in_check(state, m)
    ]


def _captures_king(move: Move) -> bool:
    return move.captured is not None and move.captured.kind is PieceKind.KING
