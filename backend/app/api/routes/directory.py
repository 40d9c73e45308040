from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps.evaluator import get_directory, get_scoring_policy, require_evaluator
from app.models.directory import Candidate, DirectoryData, LoginRequest, User
from app.models.evaluation import LEVELS
from app.services.directory_service import find_user_by_phone, visible_candidates
from app.services.scoring import (
    ScoringPolicy,
    compute_max,
    group_by_category,
    resolve_score,
)
from app.telemetry.tracing import emit_event

router = APIRouter()


def _user_response(user: User) -> dict[str, Any]:
    return {
        "id": user.id,
        "name": user.name,
        "phone": user.phone,
        "role": user.role,
        "area": user.area,
    }


def _candidate_response(candidate: Candidate, user: User) -> dict[str, Any]:
    return {
        "id": candidate.id,
        "name": candidate.name,
        "area": candidate.area,
        "phone": candidate.phone,
        "position": candidate.position,
        "status": candidate.status,
        "supStatus": candidate.sup_status,
        "supScore": candidate.sup_score,
        "recStatus": candidate.rec_status,
        "recScore": candidate.rec_score,
        "evaluated": candidate.evaluated_by(user.role),
    }


@router.post("/login")
async def login(
    payload: LoginRequest,
    directory: DirectoryData = Depends(get_directory),
):
    user = find_user_by_phone(directory.users, payload.phone)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Phone number not found",
        )
    emit_event("evaluator.logged_in", attributes={"role": user.role, "area": user.area})
    return _user_response(user)


@router.get("/candidates")
async def list_candidates(
    search: str | None = None,
    user: User = Depends(require_evaluator),
    directory: DirectoryData = Depends(get_directory),
):
    items = visible_candidates(directory.candidates, user, search)
    return {
        "scope": "all" if user.role == "Recruiter" else user.area,
        "items": [_candidate_response(item, user) for item in items],
        "total": len(items),
    }


@router.get("/questions")
async def list_questions(
    directory: DirectoryData = Depends(get_directory),
    policy: ScoringPolicy = Depends(get_scoring_policy),
):
    groups = group_by_category(directory.questions)
    return {
        "categories": [
            {
                "category": category,
                "questions": [
                    {
                        "id": question.id,
                        "question": question.question,
                        "detail": question.detail,
                        "scores": {
                            level: resolve_score(question, level, policy.strategy)
                            for level in LEVELS
                        },
                    }
                    for question in questions
                ],
            }
            for category, questions in groups.items()
        ],
        "maxScore": compute_max(directory.questions, policy.strategy),
        "threshold": policy.threshold,
        "strategy": policy.strategy,
    }
