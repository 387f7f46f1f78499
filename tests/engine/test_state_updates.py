from __future__ import annotations

import pytest

from chessroom.engine.board import STARTPOS_FEN, Color, str_to_square
from chessroom.engine.game import GameState, decode_state


def test_pawn_double_push_bookkeeping() -> None:
    after = GameState.new().play("e2e4")
    assert after.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert after.side_to_move is Color.BLACK
    assert after.ep_square == str_to_square("e3")


def test_clocks_advance_and_reset() -> None:
    state = GameState.replay(["e2e4", "e7e5", "g1f3"])
    assert state.fullmove_number == 2
    assert state.halfmove_clock == 1
    assert state.ep_square is None
    state = state.play("b8c6")
    assert state.halfmove_clock == 2
    assert state.fullmove_number == 3
    # Capture resets the halfmove clock
    state = GameState.replay(["e2e4", "d7d5", "e4d5"])
    assert state.halfmove_clock == 0


def test_apply_leaves_source_untouched() -> None:
    start = GameState.new()
    start.play("e2e4")
    assert start.to_fen() == STARTPOS_FEN


def test_replay_from_custom_start() -> None:
    start = decode_state("4k3/8/8/8/8/8/4P3/4K3 w - - 0 1")
    state = GameState.replay(["e2e4", "e8d7"], start=start)
    assert state.to_fen() == "8/3k4/8/8/4P3/8/8/4K3 w - - 1 2"


@pytest.mark.parametrize(
    "moves",
    [
        ["e2e5"],
        ["e2e4", "e2e4"],
        ["zz"],
        ["e7e5"],
    ],
)
def test_replay_rejects_bad_moves(moves: list[str]) -> None:
    with pytest.raises(ValueError):
        GameState.replay(moves)


def test_for_side_has_no_castling_or_en_passant() -> None:
    state = GameState.for_side(GameState.new().board, Color.BLACK)
    assert state.side_to_move is Color.BLACK
    assert state.castling.to_fen() == "-"
    assert state.ep_square is None
