# ============================================================
# FinalSay FastAPI App
# ------------------------------------------------------------
# This app wires everything together:
#   - Per-client fixed-window throttle
#   - Request parsing into simple / advanced / advice variants
#   - Prompt composition, OpenAI generation, text cleanup
#   - Optional reference sources (SerpAPI or model suggestions)
# ============================================================

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.concurrency import run_in_threadpool

# --- Local imports ---
from finalsay.dispatch import Dispatcher, parse_request
from finalsay.errors import ClientError, FinalSayError, MethodNotAllowed, RateLimited
from finalsay.generate.clients.openai_client import OpenAIClient
from finalsay.generate.generator import ReplyGenerator
from finalsay.ratelimit import RateLimiter, client_key
from finalsay.search.config import load_sources_config
from finalsay.search.resolver import MAX_SOURCES, SourceResolver
from finalsay.search.serpapi_client import SerpApiClient
from finalsay.settings import Settings, settings

logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


# ------------------------------------------------------------
# 🔧 Collaborator wiring
# ------------------------------------------------------------
def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def get_limiter() -> RateLimiter:
    cfg = get_settings()
    return RateLimiter(capacity=cfg.RATE_LIMIT_MAX, window_seconds=cfg.RATE_LIMIT_WINDOW_SECONDS)


def build_dispatcher(cfg: Settings) -> Dispatcher:
    if not cfg.OPENAI_API_KEY:
        # Requests still validate; generation then fails with a 500.
        return Dispatcher(generator=None)

    generator = ReplyGenerator(OpenAIClient(api_key=cfg.OPENAI_API_KEY, model=cfg.OPENAI_MODEL))

    sources_cfg = load_sources_config(cfg.SOURCES_CONFIG)
    s_cfg = sources_cfg.get("search") or {}
    search_key = s_cfg.get("api_key") or cfg.SERPAPI_API_KEY
    search_client = None
    if search_key:
        search_client = SerpApiClient(
            api_key=search_key,
            engine=s_cfg.get("engine", "google"),
            num=s_cfg.get("num", 10),
        )

    resolver = SourceResolver(
        generator,
        search_client=search_client,
        extra_domains=sources_cfg.get("extra_domains", ()),
        max_sources=sources_cfg.get("max_sources", MAX_SOURCES),
    )
    return Dispatcher(generator=generator, resolver=resolver)


@lru_cache(maxsize=1)
def get_dispatcher() -> Dispatcher:
    return build_dispatcher(get_settings())


# ------------------------------------------------------------
# 🚀 FastAPI init
# ------------------------------------------------------------
app = FastAPI(title="FinalSay API", version="1.0")


# ------------------------------------------------------------
# 📦 Pydantic models
# ------------------------------------------------------------
class GenerateBody(BaseModel):
    mode: Optional[str] = None
    text: Optional[str] = None
    message: Optional[str] = None
    scenario: Optional[str] = None
    tone: Optional[str] = None
    sliders: Optional[Dict[str, Any]] = None
    intents: Optional[List[str]] = None
    intentText: Optional[str] = None
    replyFormat: Optional[str] = None
    adviceMode: Optional[bool] = None
    wantSources: Optional[bool] = None
    persona: Optional[str] = None


class SourcePayload(BaseModel):
    title: str
    url: str
    domain: str
    query: Optional[str] = None


class GeneratePayload(BaseModel):
    replies: List[str]
    sources: Optional[List[SourcePayload]] = None


def error_response(err: FinalSayError) -> JSONResponse:
    return JSONResponse(status_code=err.status_code, content=err.to_payload())


async def read_body(request: Request) -> GenerateBody:
    try:
        data = await request.json()
    except ValueError:
        raise ClientError("Invalid JSON body")
    if not isinstance(data, dict):
        raise ClientError("Invalid request body")
    try:
        return GenerateBody.model_validate(data)
    except ValidationError as e:
        raise ClientError("Invalid request body", detail=str(e))


# ------------------------------------------------------------
# 💬 Main generate route
# ------------------------------------------------------------
@app.api_route(
    "/api/generate",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_model=GeneratePayload,
    response_model_exclude_none=True,
)
async def generate(
    request: Request,
    limiter: RateLimiter = Depends(get_limiter),
    dispatcher: Dispatcher = Depends(get_dispatcher),
):
    try:
        if request.method != "POST":
            raise MethodNotAllowed("Use POST")

        key = client_key(request.headers, request.client.host if request.client else None)
        if not limiter.allow(key):
            logger.warning("Rate limited client %s", key)
            raise RateLimited("Too many requests. Try again shortly.")

        body = await read_body(request)
        req = parse_request(body.model_dump())
        result = await run_in_threadpool(dispatcher.handle, req)
        return result.to_payload()
    except FinalSayError as e:
        if e.status_code >= 500:
            logger.error("%s: %s", e.message, e.detail or "")
        return error_response(e)
    except Exception as e:
        logger.exception("Unhandled error in /api/generate")
        return JSONResponse(status_code=500, content={"error": "Server error", "detail": str(e)})


# ------------------------------------------------------------
# 🧭 Health checks
# ------------------------------------------------------------
@app.get("/health")
def health():
    cfg = get_settings()
    return {
        "status": "ok",
        "env": cfg.ENV,
        "debug": cfg.DEBUG,
        "model": cfg.OPENAI_MODEL,
        "generation": bool(cfg.OPENAI_API_KEY),
        "search": bool(cfg.SERPAPI_API_KEY),
    }


@app.get("/")
def hello():
    return {"message": f"{get_settings().app_name} service running."}
