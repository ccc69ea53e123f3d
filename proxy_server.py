"""Server-side proxy for the analysis endpoint.

Holds the Gemini credential so desktop clients in proxy mode never see it.
The client posts raw media bytes; the model's JSON reply is forwarded
verbatim.

Run with ``woofwhisper-proxy`` or ``uvicorn proxy_server:app --port 8787``.
"""

from __future__ import annotations

import logging
import os
from typing import Callable

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from analyzer import ANALYZE_PATH, GeminiAnalyzer
from config import API_KEY_ENV, DEFAULT_MODEL
from errors import EMPTY_RESPONSE, AnalysisError
from models import DEFAULT_MIME_TYPE, MediaBlob

logger = logging.getLogger(__name__)

ALLOWED_METHODS = "POST, OPTIONS"

ApiKeyGetter = Callable[[], str]
AnalyzerFactory = Callable[[str], GeminiAnalyzer]


def _env_api_key() -> str:
    return os.getenv(API_KEY_ENV, "")


def _default_analyzer(api_key: str) -> GeminiAnalyzer:
    return GeminiAnalyzer(api_key=api_key, model=os.getenv("WOOF_MODEL", DEFAULT_MODEL))


def _error(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)


def create_app(
    get_api_key: ApiKeyGetter = _env_api_key,
    analyzer_factory: AnalyzerFactory = _default_analyzer,
) -> FastAPI:
    """Build the proxy application.

    Args:
        get_api_key: Returns the server-side credential; read per request so
            a key added to the environment is picked up without a restart.
        analyzer_factory: Builds the model client for a given key.
    """
    app = FastAPI(title="WoofWhisper proxy")

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.options(ANALYZE_PATH)
    async def preflight() -> Response:
        return Response(status_code=204)

    @app.api_route(ANALYZE_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    async def method_not_allowed() -> JSONResponse:
        return _error(405, "Method not allowed", headers={"Allow": ALLOWED_METHODS})

    @app.post(ANALYZE_PATH)
    async def analyze(request: Request) -> Response:
        api_key = get_api_key()
        if not api_key:
            logger.error("%s is not configured", API_KEY_ENV)
            return _error(500, f"Server is missing {API_KEY_ENV}")

        body = await request.body()
        if not body:
            return _error(400, "Empty request body")

        mime_type = (
            request.headers.get("x-mime-type")
            or request.headers.get("content-type")
            or DEFAULT_MIME_TYPE
        )
        blob = MediaBlob(data=body, mime_type=mime_type)
        try:
            text = await run_in_threadpool(analyzer_factory(api_key).generate_text, blob)
        except AnalysisError as exc:
            logger.error("Gemini analysis error: %s", exc)
            if exc.code == EMPTY_RESPONSE:
                return _error(502, "No response text from Gemini")
            return _error(500, "Gemini request failed")

        return Response(content=text, media_type="application/json")

    return app


app = create_app()


def main() -> None:
    logging.basicConfig(
        level=os.getenv("WOOF_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        app,
        host=os.getenv("WOOF_PROXY_HOST", "0.0.0.0"),
        port=int(os.getenv("WOOF_PROXY_PORT", "8787")),
    )


if __name__ == "__main__":
    main()
