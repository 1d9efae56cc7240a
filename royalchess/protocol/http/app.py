from __future__ import annotations

import logging
from typing import Dict, List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from .session import InMemorySessionStore
from ...config import Settings, configure_logging
from ...engine.game import Game
from ...engine.move import Coord, coord_to_str, str_to_coord


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    mode: Literal["solo", "two-player"] = "two-player"
    seed: Optional[int] = Field(default=None, description="Seed for the bot's RNG")


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_square: str = Field(..., alias="from", description="Origin square, e.g. e2")
    to_square: str = Field(..., alias="to", description="Destination square, e.g. e4")


class PromotionRequest(BaseModel):
    piece: str = Field(..., description="queen, rook, bishop or knight (or q/r/b/n)")


class TimeoutRequest(BaseModel):
    color: Literal["white", "black"]


class NotationModel(BaseModel):
    notation: str
    player: str
    move_number: int


class LegalMovesResponse(BaseModel):
    square: str
    moves: List[str]


class GameState(BaseModel):
    game_id: str
    mode: str
    accepted: bool = True
    board: List[str]
    side_to_move: str
    moves_remaining: int
    turn_number: int
    pieces_moved_this_turn: List[str]
    checking_player_retains_moves: bool
    in_check: Optional[str]
    status: str
    winner: Optional[str]
    status_message: str
    notation: List[NotationModel]
    captured: Dict[str, List[str]]
    last_move: Optional[str]
    pending_promotion: Optional[str]
    legal_moves: Dict[str, List[str]]
    history_size: int


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="Royal Chess API", version="0.1.0")

    configure_logging(settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore(settings.max_sessions)
    app.state.store = store
    app.state.settings = settings

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=GameState)
    async def create_game(req: Optional[CreateGameRequest] = None) -> GameState:
        req = req or CreateGameRequest()
        seed = req.seed if req.seed is not None else settings.bot_seed
        game_id = store.create(Game.new(req.mode, seed=seed))
        logger.info("created %s game %s", req.mode, game_id)
        return _state(game_id, _require_game(store, game_id))

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"status": "deleted"}

    @app.get("/api/games/{game_id}/legal-moves/{square}", response_model=LegalMovesResponse)
    async def get_legal_moves(game_id: str, square: str) -> LegalMovesResponse:
        game = _require_game(store, game_id)
        coord = _parse_square(square)
        return LegalMovesResponse(
            square=square, moves=[coord_to_str(c) for c in game.legal_moves_from(coord)]
        )

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        from_sq = _parse_square(req.from_square)
        to_sq = _parse_square(req.to_square)
        accepted = game.request_move(from_sq, to_sq)
        return _state(game_id, game, accepted)

    @app.post("/api/games/{game_id}/promotion", response_model=GameState)
    async def promotion(game_id: str, req: PromotionRequest) -> GameState:
        game = _require_game(store, game_id)
        return _state(game_id, game, game.resolve_promotion(req.piece))

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        return _state(game_id, game, game.request_undo())

    @app.post("/api/games/{game_id}/reset", response_model=GameState)
    async def reset(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        return _state(game_id, game, game.request_reset())

    @app.post("/api/games/{game_id}/timeout", response_model=GameState)
    async def timeout(game_id: str, req: TimeoutRequest) -> GameState:
        game = _require_game(store, game_id)
        return _state(game_id, game, game.report_timeout(req.color))

    @app.post("/api/games/{game_id}/bot-move", response_model=GameState)
    async def bot_move(game_id: str) -> GameState:
        # The "thinking" delay is the client's business; the move is immediate
        game = _require_game(store, game_id)
        return _state(game_id, game, game.request_bot_move())

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _parse_square(square: str) -> Coord:
    try:
        return str_to_coord(square)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _state(game_id: str, game: Game, accepted: bool = True) -> GameState:
    view = game.view()
    turn = view.turn
    return GameState(
        game_id=game_id,
        mode=game.mode,
        accepted=accepted,
        board=view.board,
        side_to_move=turn.side_to_move,
        moves_remaining=turn.moves_remaining,
        turn_number=turn.turn_number,
        pieces_moved_this_turn=sorted(coord_to_str(c) for c in turn.pieces_moved_this_turn),
        checking_player_retains_moves=turn.checking_player_retains_moves,
        in_check=turn.in_check,
        status=turn.status,
        winner=turn.winner,
        status_message=view.status_message,
        notation=[
            NotationModel(notation=n.notation, player=n.player, move_number=n.move_number)
            for n in view.notation
        ],
        captured=view.captured,
        last_move=view.last_move.to_str() if view.last_move else None,
        pending_promotion=coord_to_str(view.pending_promotion) if view.pending_promotion else None,
        legal_moves={
            coord_to_str(sq): [coord_to_str(d) for d in dests]
            for sq, dests in view.selectable.items()
        },
        history_size=view.history_size,
    )


# Default app for non-factory servers
app = create_app()
