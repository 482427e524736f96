"""Status endpoints.

Routes
------
GET /api/status    Current status; 503 with the same body shape when unavailable
GET /api/health    {"status": "ok"}
"""

from __future__ import annotations

from dataclasses import asdict

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

router = APIRouter()

# The service owns its cache window; clients and CDNs must not add another.
_NO_STORE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class StatusResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_open: bool
    status: str
    message: str
    announcement: str
    target_date: str
    last_updated: str
    confidence: float
    source: str
    processing_time: str
    verified: bool
    cached: bool
    stale: bool


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/status", response_model=StatusResponse)
def get_status(request: Request) -> JSONResponse:
    """Return the current school status.

    Responds 503 when the district page could not be read and no earlier
    result is available; ``verified`` is ``false`` in that case.
    """
    result = request.app.state.status_service.get_status()
    body = StatusResponse.model_validate(asdict(result)).model_dump(by_alias=True)
    return JSONResponse(
        content=body,
        status_code=200 if result.verified else 503,
        headers=_NO_STORE_HEADERS,
    )


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
