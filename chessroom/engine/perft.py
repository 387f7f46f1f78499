from __future__ import annotations

from typing import Dict

from .game import GameState
from .legality import legal_moves


def perft(state: GameState, depth: int) -> int:
    """Compute perft node count for `state` at `depth`.

    Definition:
    - depth == 0 returns 1 (the current node).
    - depth > 0 returns the sum over all legal child positions' perft(depth-1).
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if depth == 0:
        return 1
    moves = legal_moves(state)
    if depth == 1:
        return len(moves)
    return sum(perft(state.apply(m), depth - 1) for m in moves)


def divide(state: GameState, depth: int) -> Dict[str, int]:
    """Per-root-move node counts, keyed by UCI string."""
    if depth < 1:
        raise ValueError("depth must be >= 1")
    return {m.to_uci(): perft(state.apply(m), depth - 1) for m in legal_moves(state)}
