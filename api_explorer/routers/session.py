"""
Session API routes.

Exposes the server-held SessionController: edit the draft, send it,
cancel an in-flight send, and load a history entry back into the draft.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from ..dependencies import get_session
from ..exceptions import ResourceNotFoundError
from ..schemas.request import RequestSpec
from ..schemas.session import CancelResult, SessionView
from ..services.session import SessionController


router = APIRouter(prefix="/api/session", tags=["session"])


def _view(session: SessionController) -> SessionView:
    return SessionView(
        draft=session.draft,
        response=session.response,
        state=session.state.value,
        outcome=session.outcome.value if session.outcome else None,
        focus=session.focus,
        notifications=[asdict(n) for n in session.notifications],
    )


@router.get("", response_model=SessionView)
def get_session_view(session: SessionController = Depends(get_session)):
    """Get the current draft, displayed response and send state."""
    return _view(session)


@router.put("/draft", response_model=SessionView)
def replace_draft(spec: RequestSpec, session: SessionController = Depends(get_session)):
    """Replace the editable draft. Header ids sent by the client are kept."""
    session.draft = spec
    return _view(session)


@router.post("/send", response_model=SessionView)
async def send_draft(session: SessionController = Depends(get_session)):
    """
    Send the current draft.

    Raises:
        SessionBusyError: 409 if a send is already in flight
    """
    await session.send()
    return _view(session)


@router.post("/cancel", response_model=CancelResult)
def cancel_send(session: SessionController = Depends(get_session)):
    """Abandon the in-flight send, if any."""
    return CancelResult(cancelled=session.cancel())


@router.post("/load/{entry_id}", response_model=SessionView)
def load_history_entry(entry_id: str, session: SessionController = Depends(get_session)):
    """
    Load a history entry into the draft.

    Raises:
        ResourceNotFoundError: 404 if no entry has this id
    """
    for entry in session.history():
        if entry.id == entry_id:
            session.load_history_item(entry)
            return _view(session)
    raise ResourceNotFoundError("History entry", entry_id)
