from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from jdmatch.schemas.analysis import AnalysisResult

if TYPE_CHECKING:
    from jdmatch.services.session import ApplyOutcome, ResumeMatchSession


class MatchRangeOut(BaseModel):
    start: int = Field(ge=0)
    end: int = Field(ge=0)


class SessionView(BaseModel):
    session_id: str
    analysis: AnalysisResult
    overall_match: int = Field(ge=0, le=100)
    match_label: str
    resume_text: str
    applied_rewrites: list[int] = Field(default_factory=list)
    match_range: MatchRangeOut | None = None
    error: str | None = None

    @classmethod
    def from_session(cls, session: "ResumeMatchSession") -> "SessionView":
        analysis = session.analysis
        if analysis is None:
            raise ValueError("Session has no analysis to show.")
        highlight = session.match_range
        return cls(
            session_id=session.session_id,
            analysis=analysis,
            overall_match=analysis.overall_match,
            match_label=analysis.match_label,
            resume_text=session.live_text,
            applied_rewrites=sorted(session.applied),
            match_range=MatchRangeOut(start=highlight.start, end=highlight.end) if highlight else None,
            error=session.error,
        )


class ApplyRewriteResponse(BaseModel):
    status: Literal["applied", "already_applied", "not_found"]
    index: int
    tier: Literal["exact", "normalized", "fragment"] | None = None
    message: str | None = None
    session: SessionView

    @classmethod
    def from_outcome(cls, outcome: "ApplyOutcome", session: "ResumeMatchSession") -> "ApplyRewriteResponse":
        return cls(
            status=outcome.status,
            index=outcome.index,
            tier=outcome.tier,
            message=outcome.message,
            session=SessionView.from_session(session),
        )
