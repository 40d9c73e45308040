from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from app.models.evaluation import Question

Role = Literal["Recruiter", "Supervisor"]


@dataclass(frozen=True)
class User:
    id: str
    name: str
    phone: str
    role: Role
    area: str


@dataclass(frozen=True)
class Candidate:
    id: str
    name: str
    area: str
    phone: str
    position: str = ""
    status: str = ""
    sup_status: str = ""
    sup_score: float | None = None
    rec_status: str = ""
    rec_score: float | None = None

    def evaluated_by(self, role: str) -> bool:
        if role == "Supervisor":
            return bool(self.sup_status)
        return bool(self.rec_status)


@dataclass(frozen=True)
class DirectoryData:
    users: list[User] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)
    questions: list[Question] = field(default_factory=list)


class LoginRequest(BaseModel):
    phone: str = Field(..., min_length=1)

    @field_validator("phone")
    @classmethod
    def phone_has_digits(cls, value: str) -> str:
        if not any(ch.isdigit() for ch in value):
            raise ValueError("phone must contain digits")
        return value
