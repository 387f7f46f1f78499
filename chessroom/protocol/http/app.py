from __future__ import annotations

import logging
import random
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    engine_exception_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...ai.service import Difficulty, MoveSelector
from ...config import Settings, load_settings
from ...engine.board import Color, Piece
from ...engine.errors import FenError, KingNotFoundError
from ...engine.game import GameState, decode_state
from ...engine.move import Move, parse_uci
from ...engine.perft import perft as perft_nodes
from ...engine.rules import GameStatus, game_status, is_valid_move, state_for


logger = logging.getLogger(__name__)


class PositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string or bare piece placement")


class ValidateRequest(PositionRequest):
    move: str = Field(..., description="UCI move string, e.g., e2e4")
    piece: Optional[str] = Field(
        default=None, min_length=1, max_length=1, description="Declared moving piece, e.g. P"
    )


class AIMoveRequest(PositionRequest):
    difficulty: Optional[Difficulty] = None
    ai_color: Optional[str] = Field(default=None, pattern="^(white|black|w|b)$")
    seed: Optional[int] = Field(default=None, description="Seed for reproducible tie-breaks")


class PerftRequest(PositionRequest):
    depth: int = Field(default=1, ge=0)


class MoveOut(BaseModel):
    uci: str
    san: str
    from_square: str
    to_square: str
    piece: str
    captured: Optional[str]
    promotion: Optional[str]
    castling: bool
    en_passant: bool


class StatusOut(BaseModel):
    status: str
    side_to_move: str
    check: bool
    checkmate: bool
    stalemate: bool
    draw: bool
    winner: Optional[str]


class PositionResponse(BaseModel):
    fen: str
    legal_moves: list[MoveOut]
    state: StatusOut


class ValidateResponse(BaseModel):
    valid: bool
    move: Optional[MoveOut] = None
    fen_after: Optional[str] = None
    state: Optional[StatusOut] = None


class AIMoveResponse(BaseModel):
    move: Optional[MoveOut]
    fen_after: Optional[str]
    state: StatusOut


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or load_settings()
    app = FastAPI(title="Chess Room Engine API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(FenError, engine_exception_handler)
    app.add_exception_handler(KingNotFoundError, engine_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/moves/legal", response_model=PositionResponse)
    def legal(req: PositionRequest) -> PositionResponse:
        state = decode_state(req.fen)
        return PositionResponse(
            fen=state.to_fen(),
            legal_moves=[_move_out(m) for m in state.legal_moves()],
            state=_status_out(state, game_status(state)),
        )

    @app.post("/api/moves/validate", response_model=ValidateResponse)
    def validate(req: ValidateRequest) -> ValidateResponse:
        state = decode_state(req.fen)
        try:
            from_sq, to_sq, promo = parse_uci(req.move)
            declared = Piece.from_char(req.piece) if req.piece else state.board[from_sq]
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        if declared is None:
            return ValidateResponse(valid=False)
        submitted = Move(from_sq, to_sq, declared, captured=state.board[to_sq], promotion=promo)
        move = state.find_move(req.move)
        if move is None or not is_valid_move(state, submitted):
            logger.info("rejected move", extra={"move": req.move, "fen": req.fen})
            return ValidateResponse(valid=False)
        after = state.apply(move)
        return ValidateResponse(
            valid=True,
            move=_move_out(move),
            fen_after=after.to_fen(),
            state=_status_out(after, game_status(after)),
        )

    @app.post("/api/moves/ai", response_model=AIMoveResponse)
    def ai_move(req: AIMoveRequest) -> AIMoveResponse:
        parsed = decode_state(req.fen)
        color = Color.parse(req.ai_color) if req.ai_color else parsed.side_to_move
        state = state_for(parsed, color)
        difficulty = req.difficulty or settings.default_difficulty
        rng = random.Random(req.seed) if req.seed is not None else None
        move = MoveSelector(rng).select(state, difficulty)
        if move is None:
            return AIMoveResponse(
                move=None, fen_after=None, state=_status_out(state, game_status(state))
            )
        after = state.apply(move)
        logger.info("ai move", extra={"difficulty": difficulty.value, "move": move.to_uci()})
        return AIMoveResponse(
            move=_move_out(move),
            fen_after=after.to_fen(),
            state=_status_out(after, game_status(after)),
        )

    @app.post("/api/status", response_model=StatusOut)
    def status(req: PositionRequest) -> StatusOut:
        state = decode_state(req.fen)
        return _status_out(state, game_status(state))

    @app.post("/api/perft")
    def perft(req: PerftRequest) -> Dict[str, int]:
        if req.depth > settings.max_perft_depth:
            raise HTTPException(
                status_code=400, detail=f"depth must be <= {settings.max_perft_depth}"
            )
        state = decode_state(req.fen)
        return {"nodes": perft_nodes(state, req.depth), "depth": req.depth}

    return app


def _move_out(move: Move) -> MoveOut:
    uci = move.to_uci()
    return MoveOut(
        uci=uci,
        san=move.notation,
        from_square=uci[0:2],
        to_square=uci[2:4],
        piece=move.piece.to_char(),
        captured=move.captured.to_char() if move.captured else None,
        promotion=move.promotion.value if move.promotion else None,
        castling=move.castling,
        en_passant=move.en_passant,
    )


def _status_out(state: GameState, st: GameStatus) -> StatusOut:
    return StatusOut(
        status=st.status,
        side_to_move=state.side_to_move.name.lower(),
        check=st.check,
        checkmate=st.checkmate,
        stalemate=st.stalemate,
        draw=st.draw,
        winner=st.winner.name.lower() if st.winner else None,
    )


# Default app for non-factory servers
app = create_app()
