from __future__ import annotations

from typing import Callable

import httpx

Handler = Callable[[httpx.Request], httpx.Response]


class Recorder:
    """Wraps a request handler and remembers every request it served."""

    def __init__(self, handler: Handler) -> None:
        self._handler = handler
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


def routes(table: dict[str, httpx.Response | Exception]) -> Handler:
    """Handler serving fixed responses by URL; unknown URLs get a 404."""

    def handler(request: httpx.Request) -> httpx.Response:
        result = table.get(str(request.url))
        if result is None:
            return httpx.Response(404)
        if isinstance(result, Exception):
            raise result
        return result

    return handler


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)
