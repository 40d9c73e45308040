from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field

Level = Literal["Low", "Mid", "High"]

LEVELS: tuple[Level, ...] = ("Low", "Mid", "High")
LEVEL_MULTIPLIERS: dict[str, int] = {"Low": 1, "Mid": 2, "High": 3}


@dataclass(frozen=True)
class Question:
    id: str
    category: str
    question: str
    detail: str
    score_low: float | None = None
    score_mid: float | None = None
    score_high: float | None = None
    weight: float | None = None

    def explicit_score(self, level: str) -> float | None:
        return {
            "Low": self.score_low,
            "Mid": self.score_mid,
            "High": self.score_high,
        }.get(level)


@dataclass(frozen=True)
class Answer:
    question_id: str
    level: Level
    score: float


@dataclass(frozen=True)
class EvaluationSummary:
    total_score: float
    max_score: float
    percentage: float
    threshold: float
    passed: bool
    answered_count: int
    question_count: int
    complete: bool

    @property
    def remaining_count(self) -> int:
        return max(self.question_count - self.answered_count, 0)


class EvaluationCreate(BaseModel):
    candidateId: str = Field(..., min_length=1)


class LevelSelection(BaseModel):
    level: Level


class CommentUpdate(BaseModel):
    comment: str = Field("", max_length=5000)
