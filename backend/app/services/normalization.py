from __future__ import annotations

import logging
import math
import re
from typing import Any

from app.models.directory import Candidate, DirectoryData, User
from app.models.evaluation import Question

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_NON_DIGITS = re.compile(r"\D")


def coerce_number(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def coerce_score(value: Any) -> float | None:
    number = coerce_number(value)
    if number is None:
        return None
    return max(number, 0.0)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _first(row: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if row.get(key) is not None:
            return row[key]
    return None


def normalize_phone(value: Any) -> str:
    return _NON_DIGITS.sub("", _text(value))


def question_id(row: dict[str, Any]) -> str:
    identifier = _text(_first(row, "qid", "id"))
    if identifier:
        return identifier
    fallback = f"{_text(row.get('category'))}_{_text(row.get('question'))}"
    return _WHITESPACE.sub("_", fallback)


def normalize_question(row: dict[str, Any]) -> Question:
    return Question(
        id=question_id(row),
        category=_text(row.get("category")),
        question=_text(row.get("question")),
        detail=_text(row.get("detail")),
        score_low=coerce_score(_first(row, "low", "scoreLow")),
        score_mid=coerce_score(_first(row, "mid", "scoreMid")),
        score_high=coerce_score(_first(row, "high", "scoreHigh")),
        weight=coerce_score(row.get("weight")),
    )


def normalize_role(value: Any) -> str:
    return "Supervisor" if _text(value).lower() == "supervisor" else "Recruiter"


def normalize_user(row: dict[str, Any]) -> User:
    phone = normalize_phone(row.get("phone"))
    return User(
        id=_text(row.get("id")) or phone,
        name=_text(row.get("name")),
        phone=phone,
        role=normalize_role(row.get("role")),  # type: ignore[arg-type]
        area=_text(row.get("area")),
    )


def normalize_candidate(row: dict[str, Any]) -> Candidate:
    name = _text(_first(row, "candidate_name", "name"))
    return Candidate(
        id=_text(row.get("id")) or name,
        name=name,
        area=_text(row.get("area")),
        phone=normalize_phone(row.get("phone")),
        position=_text(row.get("position")),
        status=_text(row.get("status")),
        sup_status=_text(row.get("sup_status")),
        sup_score=coerce_number(row.get("sup_score")),
        rec_status=_text(row.get("rec_status")),
        rec_score=coerce_number(row.get("rec_score")),
    )


def _rows(payload: dict[str, Any], key: str) -> list[dict[str, Any]]:
    rows = payload.get(key) or []
    if not isinstance(rows, list):
        logger.warning("Ignoring %s: expected a list, got %s", key, type(rows).__name__)
        return []
    valid = [row for row in rows if isinstance(row, dict)]
    if len(valid) != len(rows):
        logger.warning("Skipped %d malformed %s rows", len(rows) - len(valid), key)
    return valid


def normalize_questions(rows: list[dict[str, Any]]) -> list[Question]:
    questions: list[Question] = []
    seen: set[str] = set()
    for row in rows:
        question = normalize_question(row)
        if question.id in seen:
            logger.warning("Skipping duplicate question id %s", question.id)
            continue
        seen.add(question.id)
        questions.append(question)
    return questions


def normalize_initial_data(payload: dict[str, Any]) -> DirectoryData:
    return DirectoryData(
        users=[normalize_user(row) for row in _rows(payload, "users")],
        candidates=[normalize_candidate(row) for row in _rows(payload, "candidates")],
        questions=normalize_questions(_rows(payload, "questions")),
    )
