from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

from fastapi import Body, Depends, FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse, Response

from tally_xml.common.errors import InputValidationError, StructuralSerializationError
from tally_xml.common.logging import configure_logging, get_logger
from tally_xml.common.settings import Settings, get_settings
from tally_xml.flows import convert_mapping, convert_master, convert_voucher

log = get_logger("tally-xml-service")

XML_MEDIA_TYPE = "application/xml"


def _auth(settings: Settings, api_key: str | None) -> None:
    if settings.auth_mode == "none":
        return
    if not api_key or api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="unauthorized")


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="X-API-Key"),
    settings: Settings = Depends(get_settings),
) -> None:
    _auth(settings, x_api_key)


app = FastAPI(title="Tally XML Service", version=os.getenv("APP_VERSION", "0.1.0"))


@app.on_event("startup")
def _startup() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    log.info("startup", auth_mode=settings.auth_mode, report_name=settings.report_name)


@app.exception_handler(InputValidationError)
def _validation_failed(request: Request, exc: InputValidationError) -> JSONResponse:
    log.info("validation_failed", path=request.url.path, errors=len(exc.errors))
    return JSONResponse(status_code=422, content={"detail": "validation failed", "errors": exc.errors})


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


def _xml_response(convert: Callable[[], str]) -> Response:
    try:
        xml = convert()
    except (StructuralSerializationError, TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return Response(content=xml, media_type=XML_MEDIA_TYPE)


@app.post("/v1/convert/master", response_class=Response, dependencies=[Depends(require_api_key)])
def convert_master_route(
    payload: dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
) -> Response:
    return _xml_response(lambda: convert_master(payload, settings))


@app.post("/v1/convert/voucher", response_class=Response, dependencies=[Depends(require_api_key)])
def convert_voucher_route(
    payload: dict[str, Any] = Body(...),
    settings: Settings = Depends(get_settings),
) -> Response:
    return _xml_response(lambda: convert_voucher(payload, settings))


@app.post("/v1/convert/raw", response_class=Response, dependencies=[Depends(require_api_key)])
def convert_raw_route(
    payload: dict[str, Any] = Body(...),
    request_type: str | None = None,
    settings: Settings = Depends(get_settings),
) -> Response:
    return _xml_response(lambda: convert_mapping(payload, request_type=request_type, settings=settings))
