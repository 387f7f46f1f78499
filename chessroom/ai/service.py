from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from chessroom.engine.board import Color
from chessroom.engine.game import GameState
from chessroom.engine.legality import legal_moves
from chessroom.engine.move import Move
from chessroom.engine.rules import Position, is_checkmate, state_for
from chessroom.eval import evaluate_move


logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        if isinstance(value, Difficulty):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"unknown difficulty: {value!r}") from None


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: float


class MoveSelector:
    """Pick one move for the computer side.

    Responsibility: choose among the legal moves of a state according to a
    difficulty tier. Randomness comes only from the injected ``rng`` so
    callers can seed it for reproducible games.

    Tiers:
    - easy: a mating move if any, else a random capture, else any random move.
    - medium / hard: score every move, pick randomly among the best ``top_n``.
      Hard is currently the same procedure as medium.
    """

    def __init__(self, rng: Optional[random.Random] = None, top_n: int = 2) -> None:
        if top_n < 1:
            raise ValueError("top_n must be >= 1")
        self._rng = rng if rng is not None else random.Random()
        self._top_n = top_n

    def select(self, state: GameState, difficulty: Union[str, Difficulty]) -> Optional[Move]:
        tier = Difficulty.parse(difficulty)
        moves = legal_moves(state)
        if not moves:
            logger.debug("no legal moves for %s", state.side_to_move.name.lower())
            return None
        if tier is Difficulty.EASY:
            chosen = self._pick_easy(state, moves)
        else:
            chosen = self._pick_scored(state, moves)
        logger.debug(
            "ai move",
            extra={"difficulty": tier.value, "move": chosen.to_uci(), "candidates": len(moves)},
        )
        return chosen

    def rank(self, state: GameState, moves: Optional[List[Move]] = None) -> List[ScoredMove]:
        """Score moves (default: all legal moves) best first; ties keep generation order."""
        candidates = legal_moves(state) if moves is None else moves
        scored = [ScoredMove(m, evaluate_move(m, state)) for m in candidates]
        return sorted(scored, key=lambda s: s.score, reverse=True)

    def _pick_easy(self, state: GameState, moves: List[Move]) -> Move:
        enemy = state.side_to_move.opponent
        for m in moves:
            if is_checkmate(state.apply(m), enemy):
                return m
        captures = [m for m in moves if m.is_capture]
        return self._rng.choice(captures or moves)

    def _pick_scored(self, state: GameState, moves: List[Move]) -> Move:
        ranked = self.rank(state, moves)
        return self._rng.choice(ranked[: self._top_n]).move


def generate_ai_move(
    difficulty: Union[str, Difficulty],
    position: Position,
    ai_color: Union[str, Color],
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Choose a move for ``ai_color`` or return ``None`` when it has none.

    Args:
        difficulty: ``"easy"``, ``"medium"`` or ``"hard"`` (or a Difficulty).
        position: Board or GameState to move from.
        ai_color: Color the engine plays, as a Color or ``"white"``/``"black"``.
        rng: Random source for tie-breaking; a fresh unseeded one if omitted.

    Raises:
        ValueError: On an unknown difficulty or color.
    """
    color = Color.parse(ai_color)
    tier = Difficulty.parse(difficulty)
    return MoveSelector(rng).select(state_for(position, color), tier)
