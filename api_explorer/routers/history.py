"""
History API routes.

Provides endpoints for listing and appending request history. There is
no update or delete endpoint; entries leave the store only through the
retention cap.
"""

from fastapi import APIRouter, Depends, status

from ..dependencies import get_history_store
from ..exceptions import ErrorResponse
from ..schemas.history import HistoryCreate, HistoryEntry, HistorySaved
from ..services.history_store import HistoryStore


router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=list[HistoryEntry])
def list_history(store: HistoryStore = Depends(get_history_store)):
    """
    Get all history entries, newest first.

    Args:
        store: History store

    Returns:
        List of HistoryEntry ordered by descending timestamp
    """
    return store.list()


@router.post(
    "",
    response_model=HistorySaved,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Missing url or method"}}
)
def append_history(
    payload: HistoryCreate,
    store: HistoryStore = Depends(get_history_store)
):
    """
    Append a request and its response summary to history.

    Args:
        payload: Request fields plus responseSummary
        store: History store

    Returns:
        The stored entry with its assigned id and timestamp

    Raises:
        HistoryValidationError: 400 if url or method is missing
    """
    item = store.append(payload)
    return HistorySaved(message="Request saved to history", item=item)
