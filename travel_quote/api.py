"""FastAPI application exposing the insurance quoter."""

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .catalog import catalog_to_dict, get_catalog
from .config import get_settings
from .errors import CatalogError, InvalidInputError
from .models import quote_response_to_dict
from .quote_engine import build_trip_request, generate_quotes


logger = logging.getLogger(__name__)

ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"

app = FastAPI(title="Travel Insurance Quoter", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CatalogError)
async def catalog_error_handler(request: Request, exc: CatalogError) -> JSONResponse:
    logger.error("Insurance catalog is misconfigured: %s", exc)
    return JSONResponse(status_code=503, content={"detail": "Insurance catalog is unavailable."})


class QuoteRequestPayload(BaseModel):
    ages: List[int] = Field(..., min_length=1)
    days: Optional[int] = Field(None, ge=1)
    start_date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    end_date: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/catalog")
def list_catalog() -> List[Dict[str, Any]]:
    return catalog_to_dict(get_catalog())


@app.post("/quotes")
def create_quotes(payload: QuoteRequestPayload) -> Dict[str, Any]:
    try:
        req = build_trip_request(
            payload.ages,
            days=payload.days,
            start_date=payload.start_date,
            end_date=payload.end_date,
        )
        response = generate_quotes(req)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return quote_response_to_dict(response)
