from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from app.models.evaluation import (
    LEVEL_MULTIPLIERS,
    LEVELS,
    Answer,
    EvaluationSummary,
    Question,
)

AnswerSet = dict[str, Answer]

STRATEGY_AUTO = "auto"
STRATEGY_EXPLICIT = "explicit"
STRATEGY_WEIGHTED = "weighted"


class IncompleteEvaluationError(Exception):
    def __init__(self, answered: int, total: int) -> None:
        self.answered = answered
        self.total = total
        super().__init__(
            f"Please evaluate every question ({answered}/{total} answered, "
            f"{total - answered} remaining)"
        )


@dataclass(frozen=True)
class ScoringPolicy:
    threshold: float = 80.0
    strategy: str = STRATEGY_AUTO


def _require_level(level: str) -> None:
    if level not in LEVEL_MULTIPLIERS:
        raise ValueError(f"Unknown level: {level!r} (expected one of {', '.join(LEVELS)})")


def _non_negative(value: float | None) -> float:
    if value is None or value != value or value < 0:
        return 0.0
    return float(value)


def weighted_score(weight: float | None, level: str) -> float:
    _require_level(level)
    if weight is None:
        return 0.0
    return _non_negative(round(weight * LEVEL_MULTIPLIERS[level] / 100, 2))


def resolve_score(question: Question, level: str, strategy: str = STRATEGY_AUTO) -> float:
    """Point value of ``level`` on ``question`` under ``strategy``.

    ``explicit`` reads only the per-level values, ``weighted`` only the weight,
    and ``auto`` prefers the per-level value and falls back to the weight.
    Anything absent resolves to 0.
    """
    _require_level(level)
    if strategy == STRATEGY_WEIGHTED:
        return weighted_score(question.weight, level)
    if strategy not in {STRATEGY_AUTO, STRATEGY_EXPLICIT}:
        raise ValueError(f"Unknown score strategy: {strategy!r}")
    explicit = question.explicit_score(level)
    if explicit is not None or strategy == STRATEGY_EXPLICIT:
        return _non_negative(explicit)
    return weighted_score(question.weight, level)


def select_level(
    answer_set: Mapping[str, Answer],
    question: Question,
    level: str,
    strategy: str = STRATEGY_AUTO,
) -> AnswerSet:
    answer = Answer(
        question_id=question.id,
        level=level,  # type: ignore[arg-type]
        score=resolve_score(question, level, strategy),
    )
    return {**answer_set, question.id: answer}


def compute_total(answer_set: Mapping[str, Answer]) -> float:
    return sum((answer.score for answer in answer_set.values()), 0.0)


def compute_max(questions: Iterable[Question], strategy: str = STRATEGY_AUTO) -> float:
    return sum((resolve_score(question, "High", strategy) for question in questions), 0.0)


def score_percentage(total: float, maximum: float) -> float:
    if maximum <= 0:
        return 0.0
    return total / maximum * 100


def is_complete(answer_set: Mapping[str, Answer], questions: Iterable[Question]) -> bool:
    return all(question.id in answer_set for question in questions)


def is_passing(total: float, threshold: float) -> bool:
    return total >= threshold


def group_by_category(questions: Iterable[Question]) -> dict[str, list[Question]]:
    groups: dict[str, list[Question]] = {}
    for question in questions:
        groups.setdefault(question.category, []).append(question)
    return groups


class EvaluationScorer:
    """Answer Set and derived totals for one evaluation form."""

    def __init__(self, questions: list[Question], policy: ScoringPolicy | None = None) -> None:
        self.questions = list(questions)
        self.policy = policy or ScoringPolicy()
        self._by_id = {question.id: question for question in self.questions}
        self._answers: AnswerSet = {}

    @property
    def answers(self) -> AnswerSet:
        return dict(self._answers)

    @property
    def categories(self) -> dict[str, list[Question]]:
        return group_by_category(self.questions)

    def question(self, question_id: str) -> Question:
        try:
            return self._by_id[question_id]
        except KeyError:
            raise KeyError(f"Unknown question: {question_id}") from None

    def level_scores(self, question: Question) -> dict[str, float]:
        return {level: resolve_score(question, level, self.policy.strategy) for level in LEVELS}

    def select(self, question_id: str, level: str) -> Answer:
        question = self.question(question_id)
        self._answers = select_level(self._answers, question, level, self.policy.strategy)
        return self._answers[question_id]

    def total(self) -> float:
        return compute_total(self._answers)

    def maximum(self) -> float:
        return compute_max(self.questions, self.policy.strategy)

    def is_complete(self) -> bool:
        return is_complete(self._answers, self.questions)

    def answered_count(self) -> int:
        return sum(1 for question in self.questions if question.id in self._answers)

    def require_complete(self) -> None:
        if not self.is_complete():
            raise IncompleteEvaluationError(self.answered_count(), len(self.questions))

    def summary(self) -> EvaluationSummary:
        total = self.total()
        maximum = self.maximum()
        return EvaluationSummary(
            total_score=total,
            max_score=maximum,
            percentage=score_percentage(total, maximum),
            threshold=self.policy.threshold,
            passed=is_passing(total, self.policy.threshold),
            answered_count=self.answered_count(),
            question_count=len(self.questions),
            complete=self.is_complete(),
        )
