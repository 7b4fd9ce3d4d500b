from __future__ import annotations

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal

from jdmatch.ai.errors import AnalysisError
from jdmatch.core.config import settings
from jdmatch.core.errors import InputValidationError, SessionStateError
from jdmatch.parsing.parse import extract_resume_text
from jdmatch.schemas.analysis import AnalysisResult
from jdmatch.services.analysis_service import analyze_resume
from jdmatch.services.export import render_resume_pdf
from jdmatch.services.reconcile import MatchRange, MatchTier, NotFound, locate_and_replace

logger = logging.getLogger(__name__)

Extractor = Callable[[bytes, str], str]
Analyzer = Callable[[str, str], Awaitable[AnalysisResult]]
Exporter = Callable[[str], bytes]
ApplyStatus = Literal["applied", "already_applied", "not_found"]

NOT_FOUND_MESSAGE = (
    "Could not find the original text in your resume to replace. It may have already been modified."
)


@dataclass(frozen=True)
class ApplyOutcome:
    status: ApplyStatus
    index: int
    match_range: MatchRange | None = None
    tier: MatchTier | None = None
    message: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == "applied"


class ResumeMatchSession:
    """State of one resume/job-description submission and its applied rewrites.

    The session is the only writer of the live resume text. It is filled by
    ``submit`` and emptied by ``reset``; a failed submission leaves it empty.
    """

    def __init__(
        self,
        *,
        session_id: str | None = None,
        extractor: Extractor | None = None,
        analyzer: Analyzer | None = None,
        exporter: Exporter | None = None,
        highlight_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session_id = session_id or uuid.uuid4().hex
        self._extract = extractor or extract_resume_text
        self._analyze = analyzer or analyze_resume
        self._export = exporter or render_resume_pdf
        self._highlight_seconds = settings.highlight_seconds if highlight_seconds is None else highlight_seconds
        self._clock = clock
        self.error: str | None = None
        self._clear()

    def _clear(self) -> None:
        self.analysis: AnalysisResult | None = None
        self.job_description = ""
        self.original_text = ""
        self.live_text = ""
        self._applied: set[int] = set()
        self._match_range: MatchRange | None = None
        self._highlight_until = 0.0

    @property
    def ready(self) -> bool:
        return self.analysis is not None

    @property
    def applied(self) -> frozenset[int]:
        return frozenset(self._applied)

    @property
    def match_range(self) -> MatchRange | None:
        if self._match_range is None or self._clock() >= self._highlight_until:
            return None
        return self._match_range

    def _require_analysis(self) -> AnalysisResult:
        if self.analysis is None:
            raise SessionStateError("No analysis yet. Submit a resume and job description first.")
        return self.analysis

    async def submit(self, content: bytes | None, filename: str | None, job_description: str | None) -> AnalysisResult:
        self._clear()
        self.error = None
        if not content:
            self.error = "Resume document is required."
            raise InputValidationError(self.error, code="missing_resume")
        if not job_description or not job_description.strip():
            self.error = "Job description is required."
            raise InputValidationError(self.error, code="missing_job_description")

        try:
            resume_text = self._extract(content, filename or "")
            analysis = await self._analyze(resume_text, job_description)
        except (InputValidationError, AnalysisError) as exc:
            self.error = str(exc)
            raise

        self.analysis = analysis
        self.job_description = job_description
        self.original_text = resume_text
        self.live_text = resume_text
        logger.info(
            "session_submitted session=%s resume_chars=%s rewrites=%s",
            self.session_id,
            len(resume_text),
            len(analysis.rewrites),
        )
        return analysis

    def apply_rewrite(self, index: int) -> ApplyOutcome:
        analysis = self._require_analysis()
        if index < 0 or index >= len(analysis.rewrites):
            raise IndexError(f"Rewrite {index} does not exist.")
        if index in self._applied:
            return ApplyOutcome(status="already_applied", index=index)

        rewrite = analysis.rewrites[index]
        result = locate_and_replace(self.live_text, rewrite.original, rewrite.suggested)
        if isinstance(result, NotFound):
            self.error = NOT_FOUND_MESSAGE
            logger.info("rewrite_not_found session=%s index=%s", self.session_id, index)
            return ApplyOutcome(status="not_found", index=index, message=NOT_FOUND_MESSAGE)

        self.live_text = result.new_text
        self._applied.add(index)
        self.error = None
        self._match_range = result.match_range
        self._highlight_until = self._clock() + self._highlight_seconds
        logger.info(
            "rewrite_applied session=%s index=%s tier=%s replaced=%s:%s",
            self.session_id,
            index,
            result.tier,
            result.replaced.start,
            result.replaced.end,
        )
        return ApplyOutcome(status="applied", index=index, match_range=result.match_range, tier=result.tier)

    def reset(self) -> None:
        self._clear()
        self.error = None
        logger.info("session_reset session=%s", self.session_id)

    def export_document(self) -> bytes:
        if not self.live_text:
            raise SessionStateError("There is no resume text to export.")
        return self._export(self.live_text)
