from __future__ import annotations

from chessroom.engine.board import Color, Piece, PieceKind
from chessroom.engine.game import GameState, decode_state


def _castles(state: GameState) -> dict[str, str]:
    return {m.to_uci(): m.notation for m in state.legal_moves() if m.castling}


def test_both_sides_available_when_path_clear() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert _castles(state) == {"e1g1": "O-O", "e1c1": "O-O-O"}


def test_kingside_castle_moves_rook_and_drops_rights() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    after = state.play("e1g1")
    assert after.board.piece_at("g1") == Piece(Color.WHITE, PieceKind.KING)
    assert after.board.piece_at("f1") == Piece(Color.WHITE, PieceKind.ROOK)
    assert after.board.piece_at("h1") is None
    assert after.board.piece_at("e1") is None
    assert after.castling.to_fen() == "kq"


def test_queenside_castle_for_black() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1")
    after = state.play("e8c8")
    assert after.board.piece_at("c8") == Piece(Color.BLACK, PieceKind.KING)
    assert after.board.piece_at("d8") == Piece(Color.BLACK, PieceKind.ROOK)
    assert after.board.piece_at("a8") is None
    assert after.castling.to_fen() == "KQ"
    assert after.fullmove_number == 2


def test_no_castling_through_attacked_square() -> None:
    # Black rook f8 covers f1
    state = decode_state("r3kr2/8/8/8/8/8/8/R3K2R w KQq - 0 1")
    assert _castles(state) == {"e1c1": "O-O-O"}


def test_no_castling_out_of_check() -> None:
    state = decode_state("4k3/4r3/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert _castles(state) == {}


def test_queenside_allowed_when_only_b_file_is_attacked() -> None:
    state = decode_state("1r2k3/8/8/8/8/8/8/R3K3 w Q - 0 1")
    assert _castles(state) == {"e1c1": "O-O-O"}


def test_no_castling_when_path_blocked() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/RN2K1NR w KQkq - 0 1")
    assert _castles(state) == {}


def test_no_castling_without_rights() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1")
    assert _castles(state) == {}


def test_no_castling_from_bare_placement() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R")
    assert _castles(state) == {}


def test_rook_move_revokes_one_right() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert state.play("h1h2").castling.to_fen() == "Qkq"
    assert state.play("a1a2").castling.to_fen() == "Kkq"


def test_king_move_revokes_both_rights() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
    assert state.play("e1f1").castling.to_fen() == "kq"


def test_capture_on_rook_home_revokes_right() -> None:
    state = decode_state("r3k2r/8/8/8/8/8/6b1/R3K2R b KQkq - 0 1")
    after = state.play("g2h1")
    assert after.castling.to_fen() == "Qkq"
