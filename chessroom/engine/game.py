from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, List, Optional

from .board import (
    STARTPOS_FEN,
    Board,
    Color,
    PieceKind,
    decode_board,
    encode_board,
    square_to_str,
    str_to_square,
)
from .errors import FenError
from .legality import legal_moves
from .move import Move, parse_uci


# Rook home squares and the castling right each one guards
_ROOK_HOMES = {0: "Q", 7: "K", 56: "q", 63: "k"}


@dataclass(frozen=True)
class CastlingRights:
    white_kingside: bool = False
    white_queenside: bool = False
    black_kingside: bool = False
    black_queenside: bool = False

    @classmethod
    def all(cls) -> "CastlingRights":
        return cls(True, True, True, True)

    @classmethod
    def from_fen(cls, field: str) -> "CastlingRights":
        if field == "-":
            return cls()
        if not field or any(ch not in "KQkq" for ch in field):
            raise FenError("invalid castling rights")
        return cls(
            white_kingside="K" in field,
            white_queenside="Q" in field,
            black_kingside="k" in field,
            black_queenside="q" in field,
        )

    def to_fen(self) -> str:
        flags = (
            ("K", self.white_kingside),
            ("Q", self.white_queenside),
            ("k", self.black_kingside),
            ("q", self.black_queenside),
        )
        # normalized ordering KQkq
        out = "".join(ch for ch, on in flags if on)
        return out or "-"

    def kingside(self, color: Color) -> bool:
        return self.white_kingside if color is Color.WHITE else self.black_kingside

    def queenside(self, color: Color) -> bool:
        return self.white_queenside if color is Color.WHITE else self.black_queenside

    def revoke(self, flags: str) -> "CastlingRights":
        """Drop the rights named by any of ``KQkq`` in ``flags``."""
        return CastlingRights(
            white_kingside=self.white_kingside and "K" not in flags,
            white_queenside=self.white_queenside and "Q" not in flags,
            black_kingside=self.black_kingside and "k" not in flags,
            black_queenside=self.black_queenside and "q" not in flags,
        )


@dataclass(frozen=True)
class GameState:
    """Position plus the bookkeeping needed to generate moves from it.

    Built fresh for each query (from FEN, a bare placement, or by replaying
    a move list) and never retained by the engine.
    """

    board: Board
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights()
    ep_square: Optional[int] = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def new(cls) -> "GameState":
        return cls(board=Board.startpos(), castling=CastlingRights.all())

    @classmethod
    def from_fen(cls, fen: str) -> "GameState":
        return decode_state(fen)

    @classmethod
    def for_side(cls, board: Board, color: Color) -> "GameState":
        """State for a bare placement: ``color`` to move, no castling, no en passant."""
        return cls(board=board, side_to_move=color)

    @classmethod
    def replay(cls, moves: Iterable[str], start: Optional["GameState"] = None) -> "GameState":
        """Rebuild a position by playing UCI moves from ``start`` (default: initial position).

        Raises:
            ValueError: If a move string is malformed or illegal where it is played.
        """
        state = cls.new() if start is None else start
        for uci in moves:
            state = state.play(uci)
        return state

    def to_fen(self) -> str:
        return encode_state(self)

    def legal_moves(self) -> List[Move]:
        return legal_moves(self)

    def find_move(self, uci: str) -> Optional[Move]:
        """Resolve a UCI string against the legal moves of this position."""
        from_sq, to_sq, promo = parse_uci(uci)
        for m in legal_moves(self):
            if m.from_sq == from_sq and m.to_sq == to_sq and m.promotion == promo:
                return m
        return None

    def play(self, uci: str) -> "GameState":
        move = self.find_move(uci)
        if move is None:
            raise ValueError(f"illegal move: {uci}")
        return self.apply(move)

    def apply(self, move: Move) -> "GameState":
        """Return the successor state after ``move``; no legality checks are made."""
        color = move.piece.color
        castling = self.castling
        if move.piece.kind is PieceKind.KING:
            castling = castling.revoke("KQ" if color is Color.WHITE else "kq")
        # Moving from or capturing on a rook home square loses that right
        touched = _ROOK_HOMES.get(move.from_sq, "") + _ROOK_HOMES.get(move.to_sq, "")
        if touched:
            castling = castling.revoke(touched)

        ep_square: Optional[int] = None
        if move.piece.kind is PieceKind.PAWN and abs(move.to_sq - move.from_sq) == 16:
            ep_square = (move.from_sq + move.to_sq) // 2

        resets_clock = move.piece.kind is PieceKind.PAWN or move.is_capture
        return replace(
            self,
            board=self.board.apply(move),
            side_to_move=color.opponent,
            castling=castling,
            ep_square=ep_square,
            halfmove_clock=0 if resets_clock else self.halfmove_clock + 1,
            fullmove_number=self.fullmove_number + (1 if color is Color.BLACK else 0),
        )


def decode_state(fen: str) -> GameState:
    """Create a game state from a Forsyth–Edwards Notation (FEN) string.

    Args:
        fen (str): Full six-field FEN, or a bare placement field (white to
            move, no castling, no en passant, clocks ``0 1``).

    Returns:
        GameState: Decoded state.

    Raises:
        FenError: If ``fen`` is empty, has the wrong number of fields, or
            contains invalid piece placement, castling rights, en passant
            square, or move counters.
    """
    if not fen or not isinstance(fen, str):
        raise FenError("FEN must be a non-empty string")
    parts = fen.strip().split()
    if len(parts) == 1:
        return GameState(board=decode_board(parts[0]))
    if len(parts) != 6:
        raise FenError("FEN must have 6 fields")
    placement, stm, castling, ep, halfmove, fullmove = parts

    board = decode_board(placement)

    if stm not in ("w", "b"):
        raise FenError("side to move must be 'w' or 'b'")

    rights = CastlingRights.from_fen(castling)

    ep_square: Optional[int]
    if ep == "-":
        ep_square = None
    else:
        try:
            ep_square = str_to_square(ep)
        except ValueError as e:
            raise FenError("invalid en passant square") from e
        # ep target must be on rank 3 or 6
        if ep_square // 8 not in (2, 5):
            raise FenError("invalid en passant square rank")

    try:
        halfmove_clock = int(halfmove)
        fullmove_number = int(fullmove)
    except ValueError as e:
        raise FenError("invalid move counters in FEN") from e
    if halfmove_clock < 0 or fullmove_number <= 0:
        raise FenError("invalid move counters in FEN")

    return GameState(
        board=board,
        side_to_move=Color(stm),
        castling=rights,
        ep_square=ep_square,
        halfmove_clock=halfmove_clock,
        fullmove_number=fullmove_number,
    )


def encode_state(state: GameState) -> str:
    """Serialize ``state`` into a normalized six-field FEN string."""
    placement = encode_board(state.board)
    ep = square_to_str(state.ep_square) if state.ep_square is not None else "-"
    return (
        f"{placement} {state.side_to_move.value} {state.castling.to_fen()} {ep} "
        f"{state.halfmove_clock} {state.fullmove_number}"
    )


__all__ = [
    "STARTPOS_FEN",
    "CastlingRights",
    "GameState",
    "decode_state",
    "encode_state",
]
