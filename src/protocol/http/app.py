from __future__ import annotations

import logging
from typing import Dict, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ConfigDict, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
    rules_invariant_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.errors import RulesInvariantError
from ...engine.game import STARTPOS, Game, GameStatus
from ...engine.move import Square, parse_move, square_to_str, str_to_square
from ...engine.perft import perft as perft_nodes
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

MAX_PERFT_DEPTH = 4


class CreateGameRequest(BaseModel):
    position: Optional[str] = Field(
        default=None, description="Piece placement and side, e.g. '4k3/8/8/8/8/8/8/4K3 w'"
    )


class CreateGameResponse(BaseModel):
    game_id: str
    position: str


class MoveRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_square: Optional[str] = Field(default=None, alias="from", description="Origin, e.g. e2")
    to_square: Optional[str] = Field(default=None, alias="to", description="Destination, e.g. e4")
    move: Optional[str] = Field(default=None, description="Coordinate move, e.g. e2e4")


class MovesResponse(BaseModel):
    square: str
    moves: list[str]


class PerftRequest(BaseModel):
    position: str = Field(default=STARTPOS)
    depth: int = Field(default=1, ge=0, le=MAX_PERFT_DEPTH)


class GameState(BaseModel):
    game_id: str
    position: str
    player_to_move: str
    board: Dict[str, str]
    in_check: bool
    checkmate: bool
    stalemate: bool
    status: str


def create_app(log_level: Union[int, str] = logging.INFO) -> FastAPI:
    app = FastAPI(title="Raycast Chess API", version="0.1.0")

    logging.basicConfig(level=log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(RulesInvariantError, rules_invariant_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    app.state.sessions = store

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        if req is not None and req.position:
            try:
                game = Game.from_position(req.position)
            except ValueError as e:
                raise HTTPException(status_code=400, detail=f"invalid position: {e}")
        else:
            game = Game.new()
        game_id = store.create(game)
        logger.info("created game %s", game_id)
        return CreateGameResponse(game_id=game_id, position=game.to_position())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        with store.locked(game_id) as game:
            return _state(game_id, _require(game))

    @app.get("/api/games/{game_id}/moves/{square}", response_model=MovesResponse)
    async def get_moves(game_id: str, square: str) -> MovesResponse:
        sq = _parse_square(square)
        with store.locked(game_id) as game:
            moves = _require(game).get_legal_moves(sq)
        return MovesResponse(square=square, moves=sorted(square_to_str(m) for m in moves))

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        from_sq, to_sq = _move_squares(req)
        with store.locked(game_id) as game:
            game = _require(game)
            if not game.try_make_move(from_sq, to_sq):
                raise HTTPException(status_code=400, detail="illegal move")
            return _state(game_id, game)

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        with store.locked(game_id) as game:
            _require(game)
            store.delete(game_id)
        return {"status": "deleted"}

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, int]:
        try:
            game = Game.from_position(req.position)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid position: {e}")
        return {"nodes": perft_nodes(game, req.depth)}

    return app


def _require(game: Optional[Game]) -> Game:
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _parse_square(text: str) -> Square:
    try:
        return str_to_square(text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _move_squares(req: MoveRequest) -> tuple[Square, Square]:
    if req.move:
        try:
            return parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    if req.from_square and req.to_square:
        return _parse_square(req.from_square), _parse_square(req.to_square)
    raise HTTPException(status_code=400, detail="either 'move' or both 'from' and 'to' are required")


def _state(game_id: str, game: Game) -> GameState:
    status = game.status()
    return GameState(
        game_id=game_id,
        position=game.to_position(),
        player_to_move=game.player_to_move().name.lower(),
        board={square_to_str(sq): str(p) for sq, p in game.board().occupied()},
        in_check=game.in_check(),
        checkmate=status is GameStatus.CHECKMATE,
        stalemate=status is GameStatus.STALEMATE,
        status=status.value,
    )


# Default app for non-factory servers
app = create_app()
