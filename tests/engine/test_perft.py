from __future__ import annotations

import pytest

from chessroom.engine.game import GameState, decode_state
from chessroom.engine.perft import divide, perft

KIWIPETE = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
POSITION_3 = "8/2p5/3p4/KP5r/1R3p1k/8/4P1P1/8 w - - 0 1"


@pytest.mark.parametrize("depth, nodes", [(0, 1), (1, 20), (2, 400), (3, 8902)])
def test_startpos(depth: int, nodes: int) -> None:
    assert perft(GameState.new(), depth) == nodes


@pytest.mark.parametrize("depth, nodes", [(1, 48), (2, 2039)])
def test_kiwipete(depth: int, nodes: int) -> None:
    assert perft(decode_state(KIWIPETE), depth) == nodes


@pytest.mark.parametrize("depth, nodes", [(1, 14), (2, 191)])
def test_position_3(depth: int, nodes: int) -> None:
    assert perft(decode_state(POSITION_3), depth) == nodes


def test_divide_sums_to_perft() -> None:
    state = decode_state(KIWIPETE)
    split = divide(state, 2)
    assert len(split) == 48
    assert sum(split.values()) == 2039
    assert "e1g1" in split and "e1c1" in split


def test_invalid_depths() -> None:
    with pytest.raises(ValueError):
        perft(GameState.new(), -1)
    with pytest.raises(ValueError):
        divide(GameState.new(), 0)
