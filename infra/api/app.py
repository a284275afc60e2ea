import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from adapters.http.fastapi.verifier_error_handler import (
    chain_store_error_handler,
    verifier_error_handler,
)
from infra.api.deps import get_verifier
from infra.api.routes.chain import router as chain_router
from infra.logging_cfg import setup_logging
from infra.storage.chain_store import ChainStoreError
from verifier.errors import VerifierError

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    raw = os.environ.get("VERIFIER_CORS_ORIGINS", "*")
    return [o.strip() for o in raw.split(",") if o.strip()]


async def _startup() -> None:
    if os.environ.get("VERIFIER_CONFIGURE_LOGGING", "1").strip().lower() in ("1", "true", "yes", "on"):
        setup_logging()
    # FAIL-FAST: no secret, no server. The verifier is built once here.
    verifier = get_verifier()
    logger.info("chain API started with %r", verifier)


@asynccontextmanager
async def lifespan(app):
    await _startup()
    try:
        yield
    finally:
        logger.info("chain API stopped")


app = FastAPI(title="Self-Healing Chain Verifier API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(VerifierError, verifier_error_handler)
app.add_exception_handler(ChainStoreError, chain_store_error_handler)

app.include_router(chain_router)
