"""Position predicates and the move-validation contract used by game rooms.

Every function takes either a bare :class:`Board` (the queried color is
treated as the side to move, without castling rights or en passant) or a
:class:`GameState`. Nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Union

from .board import Board, Color, PieceKind, decode_board, encode_board, find_king
from .errors import KingNotFoundError
from .game import GameState
from .legality import leaves_king_in_check, legal_moves
from .move import Move
from .movegen import is_square_attacked


Position = Union[Board, GameState]

STATUS_ACTIVE = "active"
STATUS_FINISHED = "finished"


@dataclass(frozen=True)
class GameStatus:
    """Outcome summary a game room persists after each move."""

    status: str
    check: bool
    checkmate: bool
    stalemate: bool
    winner: Optional[Color] = None

    @property
    def draw(self) -> bool:
        return self.stalemate


def state_for(position: Position, color: Color) -> GameState:
    """Return a state in which ``color`` is to move."""
    if isinstance(position, GameState):
        if position.side_to_move is color:
            return position
        return replace(position, side_to_move=color, ep_square=None)
    return GameState.for_side(position, color)


def _board_of(position: Position) -> Board:
    return position.board if isinstance(position, GameState) else position


def is_in_check(position: Position, color: Color) -> bool:
    """True if a pseudo-legal move of the opponent targets ``color``'s king.

    Raises:
        KingNotFoundError: If ``color`` has no king on the board.
    """
    board = _board_of(position)
    king_sq = find_king(board, color)
    if king_sq is None:
        raise KingNotFoundError(color)
    return is_square_attacked(board, king_sq, color.opponent)


def is_checkmate(position: Position, color: Color) -> bool:
    if not is_in_check(position, color):
        return False
    return not legal_moves(state_for(position, color))


def is_stalemate(position: Position, color: Color) -> bool:
    if is_in_check(position, color):
        return False
    return not legal_moves(state_for(position, color))


def is_valid_move(position: Position, move: Move) -> bool:
    """Check a submitted move against the position it is played from.

    Rejects a move when the declared piece is not on the origin square, the
    destination holds a piece of the same color or a king, the move is not
    among the legal moves, or it would leave the mover's king attacked. When
    ``position`` is a GameState, a move by the side not to move is rejected.
    """
    color = move.piece.color
    if isinstance(position, GameState) and position.side_to_move is not color:
        return False
    state = state_for(position, color)
    board = state.board
    if board[move.from_sq] != move.piece:
        return False
    target = board[move.to_sq]
    if target is not None and (target.color is color or target.kind is PieceKind.KING):
        return False
    candidate = next((m for m in legal_moves(state) if m.same_action(move)), None)
    if candidate is None:
        return False
    return not leaves_king_in_check(state, candidate)


def game_status(state: GameState) -> GameStatus:
    """Summarize the position for the side to move."""
    color = state.side_to_move
    check = is_in_check(state, color)
    if legal_moves(state):
        return GameStatus(status=STATUS_ACTIVE, check=check, checkmate=False, stalemate=False)
    if check:
        return GameStatus(
            status=STATUS_FINISHED,
            check=True,
            checkmate=True,
            stalemate=False,
            winner=color.opponent,
        )
    return GameStatus(status=STATUS_FINISHED, check=False, checkmate=False, stalemate=True)


__all__ = [
    "GameStatus",
    "Position",
    "decode_board",
    "encode_board",
    "find_king",
    "game_status",
    "is_checkmate",
    "is_in_check",
    "is_stalemate",
    "is_valid_move",
    "legal_moves",
    "state_for",
]
