from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from app.clients.sheet_api import SheetApiClient, SheetApiError
from app.models.directory import Candidate, User
from app.models.evaluation import Answer, Question
from app.repositories.evaluation_session_store import EvaluationSessionStore
from app.services.scoring import EvaluationScorer, ScoringPolicy
from app.telemetry.otel import start_span
from app.telemetry.tracing import emit_event, emit_metric

logger = logging.getLogger(__name__)


class SubmissionInProgressError(Exception):
    pass


class SubmissionFailedError(Exception):
    pass


@dataclass
class EvaluationSession:
    id: str
    evaluator: User
    candidate: Candidate
    scorer: EvaluationScorer
    opened_at: str
    comment: str = ""
    in_flight: bool = False
    submitted: bool = False
    last_error: str | None = None


def open_session(
    store: EvaluationSessionStore,
    *,
    evaluator: User,
    candidate: Candidate,
    questions: list[Question],
    policy: ScoringPolicy,
) -> EvaluationSession:
    session = EvaluationSession(
        id=uuid.uuid4().hex,
        evaluator=evaluator,
        candidate=candidate,
        scorer=EvaluationScorer(questions, policy),
        opened_at=datetime.now(timezone.utc).isoformat(),
    )
    store.add(session)
    emit_event(
        "evaluation.opened",
        session_id=session.id,
        attributes={
            "candidateId": candidate.id,
            "role": evaluator.role,
            "questions": len(questions),
        },
    )
    return session


def select_level(session: EvaluationSession, question_id: str, level: str) -> Answer:
    answer = session.scorer.select(question_id, level)
    session.last_error = None
    emit_event(
        "evaluation.level_selected",
        session_id=session.id,
        attributes={"questionId": question_id, "level": level, "score": answer.score},
    )
    return answer


def update_comment(session: EvaluationSession, comment: str) -> None:
    session.comment = comment


def discard_session(store: EvaluationSessionStore, session_id: str) -> bool:
    session = store.discard(session_id)
    if session is None:
        return False
    emit_event(
        "evaluation.discarded",
        session_id=session_id,
        attributes={"submitted": session.submitted},
    )
    return True


def build_submission_payload(session: EvaluationSession) -> dict[str, Any]:
    scorer = session.scorer
    summary = scorer.summary()
    answers = scorer.answers
    return {
        "action": "submitEvaluation",
        "candidateId": session.candidate.id,
        "candidateName": session.candidate.name,
        "area": session.candidate.area,
        "role": session.evaluator.role,
        "evaluatorName": session.evaluator.name,
        "totalScore": summary.total_score,
        "maxScore": summary.max_score,
        "passed": summary.passed,
        "answers": [
            {"qid": answer.question_id, "level": answer.level, "score": answer.score}
            for answer in (answers[q.id] for q in scorer.questions if q.id in answers)
        ],
        "comment": session.comment,
    }


async def submit(
    store: EvaluationSessionStore,
    session: EvaluationSession,
    client: SheetApiClient,
) -> dict[str, Any]:
    """Send a completed form to the sheet endpoint.

    Raises ``IncompleteEvaluationError`` before any transport call when a
    question is unanswered. The in-flight flag is cleared however the call
    ends, and on transport failure the Answer Set is left as is so the user
    can retry.
    """
    session.scorer.require_complete()
    if session.in_flight:
        raise SubmissionInProgressError("Submission already in progress")

    payload = build_submission_payload(session)
    session.in_flight = True
    try:
        with start_span("evaluation.submit", {"sessionId": session.id}):
            await client.submit_evaluation(payload)
    except SheetApiError as exc:
        session.last_error = str(exc)
        logger.warning("[%s] evaluation submit failed: %s", session.id, exc)
        emit_event(
            "evaluation.submit_failed",
            session_id=session.id,
            attributes={"statusCode": exc.status_code},
        )
        raise SubmissionFailedError("Saving failed, please try again") from exc
    finally:
        session.in_flight = False

    session.submitted = True
    emit_metric(
        "evaluation.total_score",
        payload["totalScore"],
        session_id=session.id,
        attributes={"passed": payload["passed"], "role": payload["role"]},
    )
    emit_event(
        "evaluation.submitted",
        session_id=session.id,
        attributes={"candidateId": session.candidate.id},
    )
    store.discard(session.id)
    return payload
