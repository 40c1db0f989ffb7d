from __future__ import annotations  # FastAPI server exposing archetype discovery sessions

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router as coach_router
from config import MODEL_KEYS, LlmRoute, bind_model, load_config, resolve_routes
from config.settings import settings
from llm_gateway import completion
from storage.migrate import migrate


logger = logging.getLogger(__name__)


def configure_models(path: Path) -> Dict[str, LlmRoute]:  # Bind a gateway completion for every agent model key
    cfg = load_config(path)
    routes = resolve_routes(cfg, MODEL_KEYS)
    for key, route in routes.items():
        bind_model(key, completion(route))
        logger.info("Bound %s to route %s (%s)", key, route.name, route.model)
    return routes


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:  # Prepare storage and model bindings before serving
    migrate(settings.DB_PATH)
    config_path = Path(settings.LLM_CONFIG_PATH)
    if config_path.exists():
        configure_models(config_path)
    else:
        logger.warning("LLM config %s not found; agent models are unbound", config_path)
    yield


app = FastAPI(title="FlowForge Archetype Discovery API", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"]
)
app.include_router(coach_router)


@app.get("/api/health")
def health() -> Dict[str, str]:  # Liveness check
    return {"status": "ok"}
