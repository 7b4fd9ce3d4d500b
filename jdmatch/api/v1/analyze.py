import logging

from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from jdmatch.ai.errors import AnalysisError
from jdmatch.core.config import settings
from jdmatch.core.errors import InputValidationError
from jdmatch.core.rate_limit import rate_limit
from jdmatch.parsing.parse import SUPPORTED_EXTENSIONS, file_extension, unsupported_file_type
from jdmatch.schemas.session import SessionView
from jdmatch.services.analysis_service import analyze_resume
from jdmatch.services.session import ResumeMatchSession
from jdmatch.services.session_store import session_store

logger = logging.getLogger(__name__)

router = APIRouter()


def _error_detail(code: str, error: str, detail: str) -> dict[str, str]:
    return {"code": code, "error": error, "detail": detail}


async def _read_upload(file: UploadFile) -> bytes:
    filename = file.filename or "uploaded-file"
    ext = file_extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=unsupported_file_type(ext).to_payload(),
        )

    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=_error_detail(
                    "file_too_large",
                    "File too large.",
                    f"Maximum allowed size is {settings.max_upload_bytes // (1024 * 1024)} MB.",
                ),
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/analyze", response_model=SessionView)
@rate_limit()
async def analyze(
    request: Request,
    resume: UploadFile | None = File(default=None),
    job_description: str = Form(default=""),
):
    _ = request
    content = await _read_upload(resume) if resume is not None else b""
    filename = resume.filename if resume is not None else ""

    session = ResumeMatchSession(analyzer=analyze_resume)
    try:
        await session.submit(content, filename, job_description)
    except InputValidationError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.to_payload()) from exc
    except AnalysisError as exc:
        logger.warning("analyze_failed code=%s status=%s", exc.code, exc.status_code)
        raise HTTPException(status_code=exc.status_code, detail=exc.to_payload()) from exc

    session_store.add(session)
    return SessionView.from_session(session)
