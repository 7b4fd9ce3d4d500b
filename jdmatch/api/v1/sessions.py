from fastapi import APIRouter, HTTPException, Response, status

from jdmatch.schemas.session import ApplyRewriteResponse, SessionView
from jdmatch.services.export import EXPORT_FILENAME
from jdmatch.services.session import ResumeMatchSession
from jdmatch.services.session_store import SessionNotFound, session_store

router = APIRouter()


# The store only holds submitted sessions, so routes never see an unsubmitted one.
def _get_session(session_id: str) -> ResumeMatchSession:
    try:
        return session_store.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "code": "session_not_found",
                "error": "Session not found.",
                "detail": "The session expired or was reset. Start a new analysis.",
            },
        ) from exc


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str):
    return SessionView.from_session(_get_session(session_id))


@router.post("/sessions/{session_id}/rewrites/{index}/apply", response_model=ApplyRewriteResponse)
async def apply_rewrite(session_id: str, index: int):
    session = _get_session(session_id)
    try:
        outcome = session.apply_rewrite(index)
    except IndexError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "rewrite_not_found", "error": "Rewrite not found.", "detail": str(exc)},
        ) from exc
    return ApplyRewriteResponse.from_outcome(outcome, session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def reset_session(session_id: str):
    session = _get_session(session_id)
    session.reset()
    session_store.discard(session_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/sessions/{session_id}/export")
async def export_session(session_id: str):
    pdf = _get_session(session_id).export_document()
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )
