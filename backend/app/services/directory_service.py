from __future__ import annotations

from app.models.directory import Candidate, User
from app.services.normalization import normalize_phone


def find_user_by_phone(users: list[User], phone: str) -> User | None:
    wanted = normalize_phone(phone)
    if not wanted:
        return None
    for user in users:
        if user.phone == wanted:
            return user
    return None


def find_candidate(candidates: list[Candidate], candidate_id: str) -> Candidate | None:
    for candidate in candidates:
        if candidate.id == candidate_id:
            return candidate
    return None


def can_view(user: User, candidate: Candidate) -> bool:
    return user.role == "Recruiter" or candidate.area == user.area


def visible_candidates(
    candidates: list[Candidate],
    user: User,
    search: str | None = None,
) -> list[Candidate]:
    """Candidates the user may evaluate, matching ``search`` on name or position.

    Recruiters see every area; supervisors only their own.
    """
    needle = (search or "").strip().lower()
    return [
        candidate
        for candidate in candidates
        if can_view(user, candidate)
        and (
            not needle
            or needle in candidate.name.lower()
            or needle in candidate.position.lower()
        )
    ]
