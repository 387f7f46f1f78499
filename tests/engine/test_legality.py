from __future__ import annotations

from chessroom.engine.board import Color, Piece, PieceKind, str_to_square
from chessroom.engine.game import decode_state
from chessroom.engine.legality import is_legal, leaves_king_in_check, legal_moves
from chessroom.engine.move import Move


def test_king_cannot_step_into_attack() -> None:
    # Black rook on d8 covers the whole d-file
    state = decode_state("3rk3/8/8/8/8/8/8/4K3 w - - 0 1")
    targets = {m.to_uci() for m in legal_moves(state)}
    assert targets == {"e1e2", "e1f1", "e1f2"}


def test_must_answer_check() -> None:
    # Knight can block or king can step aside; nothing else is legal
    state = decode_state("4r1k1/8/8/8/8/8/3N4/4K3 w - - 0 1")
    moves = {m.to_uci() for m in legal_moves(state)}
    assert moves == {"d2e4", "e1d1", "e1f1", "e1f2"}


def test_king_cannot_capture_defended_piece() -> None:
    state = decode_state("4k3/8/8/8/8/8/r2q4/4K3 w - - 0 1")
    move = Move(
        str_to_square("e1"),
        str_to_square("d2"),
        Piece(Color.WHITE, PieceKind.KING),
        captured=Piece(Color.BLACK, PieceKind.QUEEN),
    )
    assert leaves_king_in_check(state, move)
    assert not is_legal(state, move)


def test_check_does_not_mutate_state() -> None:
    state = decode_state("4r1k1/8/8/8/8/8/3N4/4K3 w - - 0 1")
    fen = state.to_fen()
    legal_moves(state)
    assert state.to_fen() == fen


def test_capturing_the_enemy_king_is_never_legal() -> None:
    # Black is already in check with white to move
    state = decode_state("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1")
    moves = {m.to_uci() for m in legal_moves(state)}
    assert "e1e8" not in moves
    assert "e1e7" in moves
    king_capture = Move(
        str_to_square("e1"),
        str_to_square("e8"),
        Piece(Color.WHITE, PieceKind.ROOK),
        captured=Piece(Color.BLACK, PieceKind.KING),
    )
    assert not is_legal(state, king_capture)
