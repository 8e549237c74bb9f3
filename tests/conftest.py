import asyncio
from contextlib import asynccontextmanager

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from jshunter.core.config import get_default_config
from jshunter.services.result_store import ResultStore


PADDING = "var a = 1;\n" * 12


def inline_body(statement: str) -> str:
    """Build an inline script body long enough to be scanned."""
    return f"{statement}\n{PADDING}"


def run(coro):
    return asyncio.run(coro)


@asynccontextmanager
async def script_server(routes):
    """
    Serve ``{path: body}`` (or ``{path: handler}``) over a local aiohttp server.
    Yields (server, hits) where hits counts requests per path.
    """
    hits = {}

    def make_handler(path, body):
        async def handler(request):
            hits[path] = hits.get(path, 0) + 1
            if callable(body):
                return await body(request)
            return web.Response(text=body, content_type="application/javascript")
        return handler

    app = web.Application()
    for path, body in routes.items():
        app.router.add_get(path, make_handler(path, body))

    async with TestServer(app) as server:
        yield server, hits


@pytest.fixture()
def store() -> ResultStore:
    return ResultStore()


@pytest.fixture()
def config():
    cfg = get_default_config()
    cfg.fetch.timeout = 2.0
    return cfg
