"""
Dispatch API route.

Sends a request draft from the server side, so targets that a browser's
cross-origin policy would block are reachable. History is not written
here; clients append through /api/history.
"""

from fastapi import APIRouter, Depends

from ..config import Settings
from ..dependencies import get_settings
from ..schemas.request import RequestSpec
from ..schemas.response import ResponseEnvelope
from ..services.dispatcher import dispatch


router = APIRouter(prefix="/api/dispatch", tags=["dispatch"])


@router.post("", response_model=ResponseEnvelope)
async def dispatch_request(
    spec: RequestSpec,
    settings: Settings = Depends(get_settings)
):
    """
    Send one request and return its normalized outcome.

    Always answers 200: validation and transport failures are reported in
    the envelope's error field.
    """
    return await dispatch(spec, timeout=settings.dispatch_timeout)
