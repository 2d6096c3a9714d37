"""
RPC server side: named message patterns served over ``POST /rpc/{pattern}``.

Success replies are ``{"data": result}``. Failures are rendered by the
service's exception filter as ``{"error": {statusCode, errorCode,
errorDescription, metadata?}}`` with the HTTP status equal to ``statusCode``.
"""

import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from shared.middleware.error_handler import ExceptionFilter
from shared.utils.app_logger import get_logger

logger = get_logger(__name__)

RpcHandler = Callable[[Dict[str, Any]], Awaitable[Any]]


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise StarletteHTTPException(status_code=400, detail="Malformed RPC request body")


class RpcRouter:
    def __init__(self, service_name: str):
        self.service_name = service_name
        self._handlers: Dict[str, RpcHandler] = {}

    def message_pattern(self, pattern: str) -> Callable[[RpcHandler], RpcHandler]:
        """Register the decorated coroutine as the handler of ``pattern``."""

        def decorator(func: RpcHandler) -> RpcHandler:
            self.add_pattern(pattern, func)
            return func

        return decorator

    def add_pattern(self, pattern: str, handler: RpcHandler) -> None:
        if pattern in self._handlers:
            raise ValueError(f"Message pattern '{pattern}' is already registered on {self.service_name}")
        self._handlers[pattern] = handler

    def patterns(self) -> List[str]:
        return sorted(self._handlers)

    async def dispatch(self, pattern: str, data: Optional[Dict[str, Any]]) -> Any:
        handler = self._handlers.get(pattern)
        if handler is None:
            raise StarletteHTTPException(
                status_code=404,
                detail=f"No handler for message pattern '{pattern}'",
            )
        return await handler(data or {})

    def install(self, app: FastAPI, exception_filter: ExceptionFilter) -> None:
        """Expose every registered pattern on ``app``."""

        @app.post("/rpc/{pattern}", include_in_schema=False)
        async def rpc_endpoint(pattern: str, request: Request):
            try:
                body = await _read_body(request)
                data = body.get("data") if isinstance(body, dict) else None
                result = await self.dispatch(pattern, data)
            except Exception as exc:
                status_code, reply = exception_filter.render_rpc_reply(exc, pattern)
                return JSONResponse(status_code=status_code, content=reply)

            logger.debug(f"[{self.service_name}] rpc {pattern} -> ok")
            return JSONResponse(content={"data": jsonable_encoder(result)})

        logger.info(f"{self.service_name} serving {len(self._handlers)} message patterns")
