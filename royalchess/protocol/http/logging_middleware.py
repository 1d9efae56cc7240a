from __future__ import annotations

import logging
import time
import uuid
from typing import Callable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request


logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "x-request-id"
GAMES_PREFIX = "/api/games/"
QUIET_PATHS = frozenset({"/healthz"})


def game_id_from_path(path: str) -> Optional[str]:
    """Return the ``{game_id}`` segment of a ``/api/games/{game_id}/...`` path."""
    if not path.startswith(GAMES_PREFIX):
        return None
    segment = path[len(GAMES_PREFIX) :].split("/", 1)[0]
    return segment or None


class RequestIDLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an ID and log one line on the way in and out.

    A client-supplied ``x-request-id`` is kept so a front end can correlate
    its own logs; otherwise a fresh UUID is used. Lines for game routes carry
    the game id. Health probes log at DEBUG.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        path = request.url.path
        level = logging.DEBUG if path in QUIET_PATHS else logging.INFO
        extra = {"request_id": request_id, "game_id": game_id_from_path(path)}

        logger.log(level, "request %s %s", request.method, path, extra=extra)
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.log(
            level,
            "response %d in %dms",
            response.status_code,
            int((time.perf_counter() - start) * 1000),
            extra=extra,
        )
        return response
