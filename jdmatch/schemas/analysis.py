from __future__ import annotations

import math
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

REWRITE_COUNT = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class RewriteSuggestion(BaseModel):
    model_config = ConfigDict(frozen=True)

    original: str = Field(min_length=1)
    suggested: str = Field(min_length=1)
    why: str = ""

    @property
    def rationale(self) -> str:
        return self.why


class UnverifiedSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    skill: str = Field(min_length=1)
    reason: str = ""


class AnalysisResult(BaseModel):
    """Structured report returned by the AI collaborator for one submission."""

    model_config = ConfigDict(frozen=True)

    tech_match: int = Field(ge=0, le=100)
    impact_match: int = Field(ge=0, le=100)
    ats_compatibility: int = Field(ge=0, le=100)
    summary: str = ""
    missing_keywords: list[str] = Field(default_factory=list)
    unverified_skills: list[UnverifiedSkill] = Field(
        default_factory=list,
        validation_alias=AliasChoices("unverified_skills", "hallucination_check"),
    )
    rewrites: list[RewriteSuggestion] = Field(min_length=REWRITE_COUNT)

    @field_validator("tech_match", "impact_match", "ats_compatibility", mode="before")
    @classmethod
    def _round_score(cls, value: Any) -> Any:
        if isinstance(value, float) and math.isfinite(value):
            return _round_half_up(value)
        return value

    @field_validator("missing_keywords", "unverified_skills", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("rewrites", mode="before")
    @classmethod
    def _keep_first_rewrites(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[:REWRITE_COUNT]
        return value

    @property
    def overall_match(self) -> int:
        return _round_half_up((self.tech_match + self.impact_match + self.ats_compatibility) / 3)

    @property
    def match_label(self) -> str:
        score = self.overall_match
        if score >= 76:
            return "Strong Match"
        if score >= 41:
            return "Good Start"
        return "Needs Work"
