# xml-ingestor/src/xml_ingestor/api.py
"""
HTTP front door for uploads.

PUT /product/{container}/{key}  stores the body at the given location.
PUT /product                    stores it in UPLOAD_BUCKET under the request id.
"""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

from . import __version__
from .audit import AuditLog
from .config import settings
from .errors import ConfigurationError, IngestError, MalformedRequest, PayloadTooLarge, StoreWriteFailure
from .logging_cfg import get_logger
from .models import UploadRequest
from .router import RoutingMode, UploadRouter
from .store import ObjectStore

log = get_logger(__name__)

_STATUS = {
    MalformedRequest: status.HTTP_400_BAD_REQUEST,
    PayloadTooLarge: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ConfigurationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreWriteFailure: status.HTTP_502_BAD_GATEWAY,
}


def require_api_key(x_api_key: Optional[str] = Header(None)) -> None:
    """Validate inbound API key for upload endpoints."""
    if settings.API_KEY and x_api_key != settings.API_KEY:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API key")


def create_app(store: Optional[ObjectStore] = None, router: Optional[UploadRouter] = None) -> FastAPI:
    app = FastAPI(title="XML Ingestor - Upload API", version=__version__)
    app.state.store = store or (router.store if router else ObjectStore())
    app.state.router = router or UploadRouter(app.state.store)
    audit = AuditLog()

    @app.exception_handler(IngestError)
    async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
        code = _STATUS.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)
        log.warning(f"{request.method} {request.url.path} -> {code} {exc.code}: {exc.message}")
        return JSONResponse(status_code=code, content={"error": exc.code, "message": exc.message})

    async def _upload(request: Request, mode: RoutingMode, container: Optional[str] = None, key: Optional[str] = None) -> Response:
        upload = UploadRequest(
            container=container,
            key=key,
            accept=request.headers.get("accept"),
            content_type=request.headers.get("content-type"),
            body=await request.body(),
        )
        ack = await run_in_threadpool(app.state.router.upload, upload, mode)
        audit.append("uploaded", container=ack.location.container, key=ack.location.key, mode=mode.value)
        return Response(
            status_code=status.HTTP_200_OK,
            media_type=ack.content_type,
            headers={"X-Object-Container": ack.location.container, "X-Object-Key": ack.location.key},
        )

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.put("/product", dependencies=[Depends(require_api_key)])
    async def put_generated(request: Request) -> Response:
        return await _upload(request, RoutingMode.GENERATED)

    @app.put("/product/{container}/{key:path}", dependencies=[Depends(require_api_key)])
    async def put_explicit(container: str, key: str, request: Request) -> Response:
        return await _upload(request, RoutingMode.EXPLICIT, container, key)

    return app
