from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.responses import FileResponse, JSONResponse

from projectgen import __version__
from projectgen.config import Settings
from projectgen.services.pipeline import GenerationPipeline
from projectgen.services.providers import LLMProvider, get_provider
from projectgen.services.registry import JobRegistry
from projectgen.services.render import PdfRenderer
from projectgen.web.routers import generate

APP_NAME = "projectgen"

log = logging.getLogger(APP_NAME)

def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(level=level, format="[%(levelname)s] %(name)s: %(message)s", stream=sys.stderr)

def _mount_frontend(app: FastAPI, static_dir: str) -> bool:
    root = Path(static_dir).resolve()
    index = root / "index.html"
    if not index.is_file():
        return False

    @app.get("/{path:path}", include_in_schema=False)
    async def frontend(path: str):
        if path.startswith("api/"):
            return JSONResponse({"error": "Not found"}, status_code=404)
        candidate = (root / path).resolve()
        if path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)
        return FileResponse(index)

    return True

def create_app(settings: Optional[Settings] = None,
               llm: Optional[LLMProvider] = None,
               renderer: Optional[PdfRenderer] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title=f"{APP_NAME} API", version=__version__)
    app.state.settings = settings

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.include_router(generate.router)

    @app.on_event("startup")
    async def _startup():
        registry = JobRegistry()
        registry.start_sweeper(settings.job_retention_s)
        app.state.registry = registry
        app.state.pipeline = GenerationPipeline(
            registry,
            llm or get_provider(settings),
            renderer or PdfRenderer(timeout_ms=settings.render_timeout_ms),
            pacing_delay=settings.pacing_delay_s,
        )
        log.info("Job registry ready (provider=%s)", app.state.pipeline.llm.name)

    @app.on_event("shutdown")
    async def _shutdown():
        await app.state.pipeline.shutdown()
        app.state.registry.close()
        log.info("Job registry closed")

    if _mount_frontend(app, settings.static_dir):
        log.info("Serving front-end from %s", settings.static_dir)
    return app

def run(argv: Optional[list[str]] = None) -> None:
    import uvicorn

    load_dotenv()
    settings = Settings.from_env()
    parser = argparse.ArgumentParser(description="Run the school project generator API")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (development)")
    args = parser.parse_args(argv)

    configure_logging()
    if args.reload:
        uvicorn.run("projectgen.main:app", host=args.host, port=args.port, reload=True)
    else:
        uvicorn.run(create_app(settings), host=args.host, port=args.port)

load_dotenv()
configure_logging()
app = create_app()

if __name__ == "__main__":
    run()
