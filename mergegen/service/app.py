"""FastAPI application entrypoint for mergegen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import MergeGenConfig
from ..errors import ParseError
from ..merge import GeneratedCode, Rekeys, combine_rekeys
from ..sections.markers import MarkerStyle


class MergeRequest(BaseModel):
    generated: str
    existing: str = ""
    rekeys: Optional[Dict[str, List[str]]] = None


class MergeResponse(BaseModel):
    merged: str


class CodeRequest(BaseModel):
    code: str


class ExtractResponse(BaseModel):
    generated: str


class ValidateResponse(BaseModel):
    valid: bool


class HealthResponse(BaseModel):
    status: str


def _default_style() -> MarkerStyle:
    return MarkerStyle()


def create_app(
    style_factory: Callable[[], MarkerStyle] = _default_style,
    rekeys: Optional[Rekeys] = None,
) -> FastAPI:
    """Create the FastAPI application exposing merge operations.

    ``rekeys`` are applied to every merge; a request's own rekeys win per key.
    """

    app = FastAPI(title="mergegen service", version="1.0.0")

    async def _run(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/merge", response_model=MergeResponse)
    async def merge(payload: MergeRequest) -> MergeResponse:
        code = GeneratedCode(payload.generated, style=style_factory())
        effective = combine_rekeys(rekeys, payload.rekeys)
        merged = await _run(lambda: code.merge(payload.existing, effective))
        return MergeResponse(merged=merged)

    @app.post("/extract", response_model=ExtractResponse)
    async def extract(payload: CodeRequest) -> ExtractResponse:
        code = GeneratedCode(payload.code, style=style_factory())
        generated = await _run(code.extract_generated_code)
        return ExtractResponse(generated=generated)

    @app.post("/validate", response_model=ValidateResponse)
    async def validate(payload: CodeRequest) -> ValidateResponse:
        code = GeneratedCode(payload.code, style=style_factory())
        await _run(code.assert_valid_manual_sections)
        return ValidateResponse(valid=True)

    @app.exception_handler(ParseError)
    async def parse_error_handler(_: Request, exc: ParseError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "detail": str(exc),
                "kind": exc.kind,
                "line_number": exc.line_number,
                "section_id": exc.section_id,
            },
        )

    return app


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    config: MergeGenConfig | None = None,
) -> None:  # pragma: no cover - integration path
    if config is None:
        app = create_app()
    else:
        style = config.marker_style()
        app = create_app(lambda: style, rekeys=config.rekeys)
    uvicorn.run(app, host=host, port=port)
