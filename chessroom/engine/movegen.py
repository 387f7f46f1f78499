"""Pseudo-legal move generation, one pure function per piece kind.

Moves produced here obey movement geometry, blocking and capture rules but
may still leave the mover's own king attacked; see ``legality``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Tuple

from .board import Board, Color, Piece, PieceKind
from .move import PROMOTION_KINDS, Move

if TYPE_CHECKING:
    from .game import GameState


KNIGHT_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 2),
    (1, 2),
    (-2, 1),
    (2, 1),
    (-2, -1),
    (2, -1),
    (-1, -2),
    (1, -2),
)
KING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (-1, 0),
    (1, 0),
    (-1, 1),
    (0, 1),
    (1, 1),
)
DIAGONALS: Tuple[Tuple[int, int], ...] = ((-1, -1), (1, -1), (-1, 1), (1, 1))
ORTHOGONALS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def _offset(sq: int, df: int, dr: int) -> Optional[int]:
    tf = sq % 8 + df
    tr = sq // 8 + dr
    if 0 <= tf < 8 and 0 <= tr < 8:
        return tr * 8 + tf
    return None


def _step_moves(
    square: int, piece: Piece, board: Board, offsets: Tuple[Tuple[int, int], ...]
) -> List[Move]:
    moves: List[Move] = []
    for df, dr in offsets:
        to_sq = _offset(square, df, dr)
        if to_sq is None:
            continue
        target = board[to_sq]
        if target is None or target.color is not piece.color:
            moves.append(Move(square, to_sq, piece, captured=target))
    return moves


def _ray_moves(
    square: int, piece: Piece, board: Board, directions: Tuple[Tuple[int, int], ...]
) -> List[Move]:
    moves: List[Move] = []
    for df, dr in directions:
        to_sq = _offset(square, df, dr)
        while to_sq is not None:
            target = board[to_sq]
            if target is None:
                moves.append(Move(square, to_sq, piece))
            else:
                if target.color is not piece.color:
                    moves.append(Move(square, to_sq, piece, captured=target))
                break
            to_sq = _offset(to_sq, df, dr)
    return moves


def _pawn_advance(square: int, to_sq: int, piece: Piece, captured: Optional[Piece]) -> List[Move]:
    last_rank = 7 if piece.color is Color.WHITE else 0
    if to_sq // 8 == last_rank:
        return [Move(square, to_sq, piece, captured=captured, promotion=k) for k in PROMOTION_KINDS]
    return [Move(square, to_sq, piece, captured=captured)]


def pawn_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    """Pushes, double pushes from the start rank, diagonal captures,
    promotions (one move per promotion kind) and en passant."""
    board = state.board
    direction = piece.color.pawn_direction
    start_rank = 1 if piece.color is Color.WHITE else 6
    moves: List[Move] = []

    one = _offset(square, 0, direction)
    if one is not None and board[one] is None:
        moves.extend(_pawn_advance(square, one, piece, None))
        if square // 8 == start_rank:
            two = _offset(square, 0, 2 * direction)
            if two is not None and board[two] is None:
                moves.append(Move(square, two, piece))

    for df in (-1, 1):
        cap = _offset(square, df, direction)
        if cap is None:
            continue
        target = board[cap]
        if target is not None and target.color is not piece.color:
            moves.extend(_pawn_advance(square, cap, piece, target))
        elif target is None and cap == state.ep_square:
            # The bypassed pawn stands beside us on the target file
            victim = board[(square // 8) * 8 + cap % 8]
            if victim == Piece(piece.color.opponent, PieceKind.PAWN):
                moves.append(Move(square, cap, piece, captured=victim, en_passant=True))
    return moves


def knight_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    return _step_moves(square, piece, state.board, KNIGHT_OFFSETS)


def bishop_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    return _ray_moves(square, piece, state.board, DIAGONALS)


def rook_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    return _ray_moves(square, piece, state.board, ORTHOGONALS)


def queen_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    return bishop_moves(square, piece, state) + rook_moves(square, piece, state)


def king_moves(
    square: int, piece: Piece, state: "GameState", *, include_castling: bool = True
) -> List[Move]:
    """Adjacent squares, plus castling when the rights and path allow it."""
    moves = _step_moves(square, piece, state.board, KING_OFFSETS)
    if include_castling:
        moves.extend(_castling_moves(square, piece, state))
    return moves


def _castling_moves(square: int, piece: Piece, state: "GameState") -> List[Move]:
    board = state.board
    color = piece.color
    base = color.home_rank * 8
    if square != base + 4:
        return []
    rook = Piece(color, PieceKind.ROOK)
    enemy = color.opponent
    moves: List[Move] = []
    # (right held, rook square, squares that must be empty, squares the king crosses)
    sides = (
        (state.castling.kingside(color), base + 7, (base + 5, base + 6), (base + 5, base + 6)),
        (
            state.castling.queenside(color),
            base,
            (base + 1, base + 2, base + 3),
            (base + 3, base + 2),
        ),
    )
    for allowed, rook_sq, between, crossed in sides:
        if not allowed or board[rook_sq] != rook:
            continue
        if any(board[sq] is not None for sq in between):
            continue
        if is_square_attacked(board, square, enemy):
            return []
        if any(is_square_attacked(board, sq, enemy) for sq in crossed):
            continue
        moves.append(Move(square, crossed[-1], piece, castling=True))
    return moves


def piece_moves(square: int, state: "GameState", color: Color) -> List[Move]:
    """Pseudo-legal moves for the piece of ``color`` standing on ``square``.

    An empty square or a piece of the other color yields no moves.
    """
    piece = state.board[square]
    if piece is None or piece.color is not color:
        return []
    match piece.kind:
        case PieceKind.PAWN:
            return pawn_moves(square, piece, state)
        case PieceKind.KNIGHT:
            return knight_moves(square, piece, state)
        case PieceKind.BISHOP:
            return bishop_moves(square, piece, state)
        case PieceKind.ROOK:
            return rook_moves(square, piece, state)
        case PieceKind.QUEEN:
            return queen_moves(square, piece, state)
        case PieceKind.KING:
            return king_moves(square, piece, state)
    raise AssertionError(f"unhandled piece kind: {piece.kind!r}")


def pseudo_legal_moves(state: "GameState", color: Optional[Color] = None) -> List[Move]:
    """All pseudo-legal moves of ``color`` (default: side to move)."""
    side = state.side_to_move if color is None else color
    moves: List[Move] = []
    for sq, _ in state.board.pieces(side):
        moves.extend(piece_moves(sq, state, side))
    return moves


def is_square_attacked(board: Board, sq: int, by_color: Color) -> bool:
    """Return True if any piece of ``by_color`` could capture on ``sq``.

    Equivalent to asking whether a pseudo-legal move of ``by_color`` targets
    an occupied ``sq``; pawn diagonals count even when ``sq`` is empty, which
    is what castling path checks need.
    """
    # Pawn attacks come from one rank behind, relative to the attacker
    pawn = Piece(by_color, PieceKind.PAWN)
    for df in (-1, 1):
        o = _offset(sq, df, -by_color.pawn_direction)
        if o is not None and board[o] == pawn:
            return True

    knight = Piece(by_color, PieceKind.KNIGHT)
    for df, dr in KNIGHT_OFFSETS:
        o = _offset(sq, df, dr)
        if o is not None and board[o] == knight:
            return True

    king = Piece(by_color, PieceKind.KING)
    for df, dr in KING_OFFSETS:
        o = _offset(sq, df, dr)
        if o is not None and board[o] == king:
            return True

    for directions, sliders in (
        (DIAGONALS, (PieceKind.BISHOP, PieceKind.QUEEN)),
        (ORTHOGONALS, (PieceKind.ROOK, PieceKind.QUEEN)),
    ):
        for df, dr in directions:
            o = _offset(sq, df, dr)
            while o is not None:
                p = board[o]
                if p is not None:
                    if p.color is by_color and p.kind in sliders:
                        return True
                    break
                o = _offset(o, df, dr)

    return False
