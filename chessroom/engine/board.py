from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from .errors import FenError

if TYPE_CHECKING:
    from .move import Move


STARTPOS_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
STARTPOS_FEN = f"{STARTPOS_PLACEMENT} w KQkq - 0 1"


class Color(Enum):
    WHITE = "w"
    BLACK = "b"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    @property
    def pawn_direction(self) -> int:
        """Rank delta of a pawn push for this color."""
        return 1 if self is Color.WHITE else -1

    @property
    def home_rank(self) -> int:
        """Zero-based back rank index."""
        return 0 if self is Color.WHITE else 7

    @classmethod
    def parse(cls, value: Union[str, "Color"]) -> "Color":
        """Accept ``Color`` members, FEN letters (``w``/``b``) or names (``white``/``black``)."""
        if isinstance(value, Color):
            return value
        v = str(value).strip().lower()
        if v in ("w", "white"):
            return Color.WHITE
        if v in ("b", "black"):
            return Color.BLACK
        raise ValueError(f"invalid color: {value!r}")


class PieceKind(Enum):
    PAWN = "p"
    KNIGHT = "n"
    BISHOP = "b"
    ROOK = "r"
    QUEEN = "q"
    KING = "k"

    @property
    def letter(self) -> str:
        """Uppercase SAN letter (``""`` for pawns)."""
        return "" if self is PieceKind.PAWN else self.value.upper()


@dataclass(frozen=True)
class Piece:
    color: Color
    kind: PieceKind

    def __str__(self) -> str:
        return self.to_char()

    def to_char(self) -> str:
        """FEN character: uppercase for white, lowercase for black."""
        ch = self.kind.value
        return ch.upper() if self.color is Color.WHITE else ch

    @classmethod
    def from_char(cls, ch: str) -> "Piece":
        try:
            return CHAR_TO_PIECE[ch]
        except KeyError:
            raise ValueError(f"invalid piece character: {ch!r}") from None


CHAR_TO_PIECE: Dict[str, Piece] = {
    (kind.value.upper() if color is Color.WHITE else kind.value): Piece(color, kind)
    for color in Color
    for kind in PieceKind
}


def str_to_square(s: str) -> int:
    """Convert algebraic notation into a 0-based square index.

    Args:
        s (str): Square name such as ``"e4"``.

    Returns:
        int: Zero-based square index.

    Raises:
        ValueError: If ``s`` is not a valid square.
    """
    if not isinstance(s, str) or len(s) != 2:
        raise ValueError(f"invalid square: {s!r}")
    if s[0] < "a" or s[0] > "h" or s[1] < "1" or s[1] > "8":
        raise ValueError(f"invalid square: {s!r}")
    file = ord(s[0]) - ord("a")
    rank = int(s[1]) - 1
    return rank * 8 + file


def square_to_str(idx: int) -> str:
    """Convert a 0-based square index into algebraic notation.

    Args:
        idx (int): Square index in range 0..63.

    Returns:
        str: Algebraic notation for ``idx``.

    Raises:
        ValueError: If ``idx`` is outside the valid square range.
    """
    if idx < 0 or idx > 63:
        raise ValueError(f"invalid square index: {idx}")
    file = idx % 8
    rank = idx // 8
    return chr(ord("a") + file) + str(rank + 1)


_BACK_RANK = (
    PieceKind.ROOK,
    PieceKind.KNIGHT,
    PieceKind.BISHOP,
    PieceKind.QUEEN,
    PieceKind.KING,
    PieceKind.BISHOP,
    PieceKind.KNIGHT,
    PieceKind.ROOK,
)


@dataclass(frozen=True)
class Board:
    """Immutable piece placement.

    Notes:
    - Squares are 0..63 (a1=0 .. h8=63), rank-major from white's perspective.
    - Every edit returns a new Board; instances are safe to share between calls.
    """

    squares: Tuple[Optional[Piece], ...]

    def __post_init__(self) -> None:
        if len(self.squares) != 64:
            raise ValueError(f"board must have 64 squares, got {len(self.squares)}")

    @classmethod
    def empty(cls) -> "Board":
        return cls(squares=(None,) * 64)

    @classmethod
    def startpos(cls) -> "Board":
        """Create a board holding the standard starting placement.

        Returns:
            Board: Board with both armies on their home squares.
        """
        squares: List[Optional[Piece]] = [None] * 64
        for f, kind in enumerate(_BACK_RANK):
            squares[f] = Piece(Color.WHITE, kind)
            squares[56 + f] = Piece(Color.BLACK, kind)
            squares[8 + f] = Piece(Color.WHITE, PieceKind.PAWN)
            squares[48 + f] = Piece(Color.BLACK, PieceKind.PAWN)
        return cls(squares=tuple(squares))

    @classmethod
    def from_mapping(cls, pieces: Mapping[Union[str, int], Union[Piece, str]]) -> "Board":
        """Build a board from ``{"e1": "K", "e8": Piece(...)}``-style mappings.

        Args:
            pieces (Mapping): Square labels or indices to pieces or FEN piece chars.

        Returns:
            Board: Board with only the given squares occupied.

        Raises:
            ValueError: If a square or piece character is invalid.
        """
        squares: List[Optional[Piece]] = [None] * 64
        for key, value in pieces.items():
            sq = str_to_square(key) if isinstance(key, str) else key
            if not 0 <= sq < 64:
                raise ValueError(f"invalid square index: {sq}")
            squares[sq] = Piece.from_char(value) if isinstance(value, str) else value
        return cls(squares=tuple(squares))

    def __getitem__(self, sq: int) -> Optional[Piece]:
        return self.squares[sq]

    def piece_at(self, square: Union[str, int]) -> Optional[Piece]:
        sq = str_to_square(square) if isinstance(square, str) else square
        return self.squares[sq]

    def is_empty(self, sq: int) -> bool:
        return self.squares[sq] is None

    def pieces(self, color: Optional[Color] = None) -> Iterator[Tuple[int, Piece]]:
        """Yield ``(square, piece)`` pairs in square order, optionally for one color."""
        for sq, p in enumerate(self.squares):
            if p is not None and (color is None or p.color is color):
                yield sq, p

    def place(self, sq: int, piece: Optional[Piece]) -> "Board":
        squares = list(self.squares)
        squares[sq] = piece
        return Board(squares=tuple(squares))

    def remove(self, sq: int) -> "Board":
        return self.place(sq, None)

    def apply(self, move: "Move") -> "Board":
        """Return a new board with ``move`` played; the receiver is unchanged.

        Handles promotion, the rook hop of a castling move and removal of
        the pawn taken en passant. No legality checks are made.
        """
        squares = list(self.squares)
        squares[move.from_sq] = None
        if move.en_passant:
            # Captured pawn sits beside the origin, on the destination file
            squares[(move.from_sq // 8) * 8 + move.to_sq % 8] = None
        if move.castling:
            rank_base = (move.from_sq // 8) * 8
            if move.to_sq % 8 == 6:
                rook_from, rook_to = rank_base + 7, rank_base + 5
            else:
                rook_from, rook_to = rank_base, rank_base + 3
            squares[rook_to] = squares[rook_from]
            squares[rook_from] = None
        if move.promotion is not None:
            squares[move.to_sq] = Piece(move.piece.color, move.promotion)
        else:
            squares[move.to_sq] = move.piece
        return Board(squares=tuple(squares))

    def __repr__(self) -> str:
        return f"Board({encode_board(self)!r})"

    def ascii(self) -> str:
        rows: List[str] = []
        for rank in range(7, -1, -1):
            row = [str(p) if p else "." for p in self.squares[rank * 8 : rank * 8 + 8]]
            rows.append(f"{rank + 1} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)


def decode_board(text: str) -> Board:
    """Decode the piece-placement field of a FEN string.

    Args:
        text (str): Placement such as ``"8/8/8/8/8/8/8/4K2k"``; a full FEN is
            accepted and only its first field is read.

    Returns:
        Board: Decoded placement.

    Raises:
        FenError: If the text is empty, does not have 8 ranks, a rank does
            not cover exactly 8 files, or contains an unknown character.
    """
    if not text or not isinstance(text, str) or not text.strip():
        raise FenError("FEN must be a non-empty string")
    placement = text.strip().split()[0]
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise FenError("FEN board must have 8 ranks")
    squares: List[Optional[Piece]] = [None] * 64
    for rank_idx, rank in enumerate(ranks[::-1]):  # start from rank 1 (bottom)
        file_idx = 0
        for ch in rank:
            if ch in "0123456789":
                n = int(ch)
                if n < 1 or n > 8:
                    raise FenError("invalid empty count in FEN rank")
                file_idx += n
            else:
                piece = CHAR_TO_PIECE.get(ch)
                if piece is None:
                    raise FenError(f"invalid piece in FEN: {ch!r}")
                if file_idx >= 8:
                    raise FenError("too many squares in FEN rank")
                squares[rank_idx * 8 + file_idx] = piece
                file_idx += 1
            if file_idx > 8:
                raise FenError("too many squares in FEN rank")
        if file_idx != 8:
            raise FenError("rank does not sum to 8 squares in FEN")
    return Board(squares=tuple(squares))


def encode_board(board: Board) -> str:
    """Encode a board as a FEN piece-placement field.

    Args:
        board (Board): Board to serialize.

    Returns:
        str: Placement string, ranks 8 to 1 separated by ``/``.
    """
    ranks_str: List[str] = []
    for rank_idx in range(7, -1, -1):  # 7..0 maps to ranks 8..1
        run = 0
        row = []
        for file_idx in range(8):
            p = board[rank_idx * 8 + file_idx]
            if p is None:
                run += 1
            else:
                if run > 0:
                    row.append(str(run))
                    run = 0
                row.append(p.to_char())
        if run > 0:
            row.append(str(run))
        ranks_str.append("".join(row))
    return "/".join(ranks_str)


def find_king(board: Board, color: Color) -> Optional[int]:
    """Return the square of ``color``'s king, or ``None`` when it is absent."""
    for sq, p in enumerate(board.squares):
        if p is not None and p.kind is PieceKind.KING and p.color is color:
            return sq
    return None


__all__ = [
    "STARTPOS_FEN",
    "STARTPOS_PLACEMENT",
    "Board",
    "Color",
    "Piece",
    "PieceKind",
    "decode_board",
    "encode_board",
    "find_king",
    "square_to_str",
    "str_to_square",
]
