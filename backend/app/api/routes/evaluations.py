from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps.evaluator import (
    get_directory,
    get_scoring_policy,
    get_sheet_client,
    require_evaluator,
    require_phone,
)
from app.clients.sheet_api import SheetApiClient
from app.models.directory import DirectoryData, User
from app.models.evaluation import CommentUpdate, EvaluationCreate, LevelSelection
from app.repositories.evaluation_session_store import (
    EvaluationSessionStore,
    get_session_store,
)
from app.services import evaluation_service
from app.services.directory_service import can_view, find_candidate
from app.services.evaluation_service import (
    EvaluationSession,
    SubmissionFailedError,
    SubmissionInProgressError,
)
from app.services.scoring import IncompleteEvaluationError, ScoringPolicy

router = APIRouter()


def _session_response(session: EvaluationSession) -> dict[str, Any]:
    scorer = session.scorer
    answers = scorer.answers
    summary = scorer.summary()
    return {
        "id": session.id,
        "openedAt": session.opened_at,
        "candidate": {
            "id": session.candidate.id,
            "name": session.candidate.name,
            "area": session.candidate.area,
            "position": session.candidate.position,
        },
        "evaluator": {
            "name": session.evaluator.name,
            "role": session.evaluator.role,
            "area": session.evaluator.area,
        },
        "categories": [
            {
                "category": category,
                "questions": [
                    {
                        "id": question.id,
                        "question": question.question,
                        "detail": question.detail,
                        "scores": scorer.level_scores(question),
                        "selectedLevel": (
                            answers[question.id].level if question.id in answers else None
                        ),
                    }
                    for question in questions
                ],
            }
            for category, questions in scorer.categories.items()
        ],
        "answers": [
            {"questionId": answer.question_id, "level": answer.level, "score": answer.score}
            for answer in answers.values()
        ],
        "comment": session.comment,
        "totalScore": summary.total_score,
        "maxScore": summary.max_score,
        "percentage": summary.percentage,
        "threshold": summary.threshold,
        "passed": summary.passed,
        "answeredCount": summary.answered_count,
        "questionCount": summary.question_count,
        "complete": summary.complete,
        "inFlight": session.in_flight,
        "lastError": session.last_error,
    }


def _owned_session(
    session_id: str,
    phone: str,
    store: EvaluationSessionStore,
) -> EvaluationSession:
    session = store.get(session_id)
    if session is None or session.evaluator.phone != phone:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return session


@router.post("/evaluations", status_code=status.HTTP_201_CREATED)
async def open_evaluation(
    payload: EvaluationCreate,
    user: User = Depends(require_evaluator),
    directory: DirectoryData = Depends(get_directory),
    policy: ScoringPolicy = Depends(get_scoring_policy),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    candidate = find_candidate(directory.candidates, payload.candidateId)
    if candidate is None or not can_view(user, candidate):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Candidate not found",
        )
    session = evaluation_service.open_session(
        store,
        evaluator=user,
        candidate=candidate,
        questions=directory.questions,
        policy=policy,
    )
    return _session_response(session)


@router.get("/evaluations/{session_id}")
async def get_evaluation(
    session_id: str,
    phone: str = Depends(require_phone),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    return _session_response(_owned_session(session_id, phone, store))


@router.put("/evaluations/{session_id}/answers/{question_id}")
async def select_level(
    session_id: str,
    question_id: str,
    payload: LevelSelection,
    phone: str = Depends(require_phone),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    session = _owned_session(session_id, phone, store)
    if session.in_flight:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Submission in progress",
        )
    try:
        evaluation_service.select_level(session, question_id, payload.level)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Unknown question: {question_id}",
        ) from exc
    return _session_response(session)


@router.put("/evaluations/{session_id}/comment")
async def update_comment(
    session_id: str,
    payload: CommentUpdate,
    phone: str = Depends(require_phone),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    session = _owned_session(session_id, phone, store)
    evaluation_service.update_comment(session, payload.comment)
    return _session_response(session)


@router.post("/evaluations/{session_id}/submit")
async def submit_evaluation(
    session_id: str,
    phone: str = Depends(require_phone),
    store: EvaluationSessionStore = Depends(get_session_store),
    client: SheetApiClient = Depends(get_sheet_client),
):
    session = _owned_session(session_id, phone, store)
    try:
        payload = await evaluation_service.submit(store, session, client)
    except IncompleteEvaluationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "message": str(exc),
                "answered": exc.answered,
                "total": exc.total,
            },
        ) from exc
    except SubmissionInProgressError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(exc),
        ) from exc
    except SubmissionFailedError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(exc),
        ) from exc
    return {
        "status": "submitted",
        "sessionId": session_id,
        "totalScore": payload["totalScore"],
        "maxScore": payload["maxScore"],
        "passed": payload["passed"],
    }


@router.delete("/evaluations/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_evaluation(
    session_id: str,
    phone: str = Depends(require_phone),
    store: EvaluationSessionStore = Depends(get_session_store),
):
    _owned_session(session_id, phone, store)
    evaluation_service.discard_session(store, session_id)
    return None
