from __future__ import annotations

import random

import pytest

from chessroom.ai.service import Difficulty, MoveSelector, generate_ai_move
from chessroom.engine.board import Color, decode_board
from chessroom.engine.game import GameState, decode_state
from chessroom.engine.rules import is_checkmate

MATE_IN_ONE = "7k/Q7/6K1/8/8/8/8/8 w - - 0 1"
FREE_PAWN = "4k3/8/8/8/8/8/3p4/4K3 w - - 0 1"


def test_difficulty_parse() -> None:
    assert Difficulty.parse("Easy") is Difficulty.EASY
    assert Difficulty.parse(Difficulty.HARD) is Difficulty.HARD
    with pytest.raises(ValueError):
        Difficulty.parse("grandmaster")


def test_easy_takes_mate_when_available() -> None:
    state = decode_state(MATE_IN_ONE)
    for seed in range(5):
        move = MoveSelector(random.Random(seed)).select(state, "easy")
        assert move is not None
        assert is_checkmate(state.apply(move), Color.BLACK)


def test_easy_prefers_captures() -> None:
    state = decode_state(FREE_PAWN)
    for seed in range(10):
        move = MoveSelector(random.Random(seed)).select(state, Difficulty.EASY)
        assert move is not None and move.to_uci() == "e1d2"


def test_medium_picks_from_top_two() -> None:
    state = GameState.new()
    selector = MoveSelector(random.Random(0))
    ranked = selector.rank(state)
    top = {ranked[0].move, ranked[1].move}
    for seed in range(10):
        assert MoveSelector(random.Random(seed)).select(state, "medium") in top


def test_medium_finds_mate_in_one() -> None:
    state = decode_state(MATE_IN_ONE)
    for seed in range(5):
        move = MoveSelector(random.Random(seed)).select(state, "medium")
        assert move is not None
        assert is_checkmate(state.apply(move), Color.BLACK)


def test_hard_matches_medium_for_same_seed() -> None:
    state = GameState.replay(["e2e4", "e7e5", "g1f3"])
    for seed in range(5):
        medium = MoveSelector(random.Random(seed)).select(state, "medium")
        hard = MoveSelector(random.Random(seed)).select(state, "hard")
        assert medium == hard


def test_seeded_selection_is_reproducible() -> None:
    state = GameState.new()
    first = MoveSelector(random.Random(42)).select(state, "easy")
    second = MoveSelector(random.Random(42)).select(state, "easy")
    assert first == second


def test_rank_is_sorted_best_first() -> None:
    ranked = MoveSelector().rank(GameState.new())
    scores = [s.score for s in ranked]
    assert scores == sorted(scores, reverse=True)
    assert len(ranked) == 20


def test_no_move_when_game_is_over() -> None:
    mated = GameState.replay(["f2f3", "e7e5", "g2g4", "d8h4"])
    stalemated = decode_state("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    for state in (mated, stalemated):
        for tier in Difficulty:
            assert MoveSelector(random.Random(1)).select(state, tier) is None


def test_generate_ai_move_for_bare_board() -> None:
    board = decode_board("rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR")
    move = generate_ai_move("medium", board, "black", random.Random(3))
    assert move is not None
    assert move.piece.color is Color.BLACK


def test_generate_ai_move_rejects_bad_arguments() -> None:
    state = GameState.new()
    with pytest.raises(ValueError):
        generate_ai_move("impossible", state, "white")
    with pytest.raises(ValueError):
        generate_ai_move("easy", state, "green")


def test_top_n_must_be_positive() -> None:
    with pytest.raises(ValueError):
        MoveSelector(top_n=0)


def test_every_tier_emits_only_legal_moves() -> None:
    rng = random.Random(2024)
    state = GameState.new()
    for _ in range(30):
        legal = state.legal_moves()
        if not legal:
            break
        for tier in Difficulty:
            move = MoveSelector(random.Random(rng.randrange(1 << 30))).select(state, tier)
            assert move in legal
        state = state.apply(rng.choice(legal))


@pytest.mark.parametrize("tier", list(Difficulty))
def test_position_with_enemy_king_in_check_does_not_raise(tier: Difficulty) -> None:
    board = decode_board("4k3/8/8/8/8/8/8/4R1K1")
    move = generate_ai_move(tier, board, "white", random.Random(0))
    assert move is not None
    assert move.to_uci() != "e1e8"
    assert move in GameState.for_side(board, Color.WHITE).legal_moves()
