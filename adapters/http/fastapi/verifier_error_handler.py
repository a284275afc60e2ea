from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from infra.storage.chain_store import ChainStoreError
from verifier.errors import VerifierError


def _error_body(code: str, message: str, meta: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return {"success": False, "code": code, "message": message, "meta": meta}


async def verifier_error_handler(_: Request, exc: VerifierError) -> JSONResponse:
    """
    Convert a core VerifierError into the HTTP response.

    This module is the ONLY place where status codes and the error body shape
    are decided. Routers must not reinterpret core or store errors.
    """
    return JSONResponse(
        status_code=exc.http_status,
        content=_error_body(exc.code, exc.detail, exc.meta),
    )


async def chain_store_error_handler(_: Request, exc: ChainStoreError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=_error_body(exc.code, str(exc)),
    )
