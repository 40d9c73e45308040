import logging

from app.services.normalization import (
    coerce_number,
    normalize_candidate,
    normalize_initial_data,
    normalize_phone,
    normalize_question,
    normalize_user,
    question_id,
)


def test_question_prefers_lowercase_score_columns():
    question = normalize_question(
        {"qid": " Q7 ", "category": "Skills", "question": "Q", "low": "2", "scoreLow": 9, "scoreMid": "4", "high": 6}
    )
    assert question.id == "Q7"
    assert question.score_low == 2
    assert question.score_mid == 4
    assert question.score_high == 6
    assert question.weight is None


def test_non_numeric_scores_become_none():
    question = normalize_question({"qid": "Q1", "low": "n/a", "mid": "", "high": None, "weight": "abc"})
    assert question.score_low is None
    assert question.score_mid is None
    assert question.score_high is None
    assert question.weight is None


def test_weight_accepts_numeric_strings():
    question = normalize_question({"id": 5, "category": "c", "question": "q", "weight": "1,200"})
    assert question.id == "5"
    assert question.weight == 1200


def test_question_id_falls_back_to_category_and_prompt():
    assert question_id({"category": "Soft skills", "question": "Speaks  clearly"}) == "Soft_skills_Speaks_clearly"


def test_coerce_number_rejects_booleans_and_nan():
    assert coerce_number(True) is None
    assert coerce_number(float("nan")) is None
    assert coerce_number(" 12.5 ") == 12.5


def test_phone_normalization_strips_formatting():
    assert normalize_phone("081-234 5678") == "0812345678"
    assert normalize_phone(None) == ""


def test_user_role_defaults_to_recruiter():
    user = normalize_user({"name": "A", "phone": "0800000000", "role": "supervisor", "area": "North"})
    assert user.role == "Supervisor"
    assert user.id == "0800000000"
    assert normalize_user({"phone": "1", "role": "admin"}).role == "Recruiter"


def test_candidate_accepts_alternate_name_field():
    candidate = normalize_candidate({"name": "Dao", "area": "East", "rec_score": "42"})
    assert candidate.name == "Dao"
    assert candidate.id == "Dao"
    assert candidate.rec_score == 42
    assert candidate.sup_score is None


def test_initial_data_skips_malformed_rows_and_duplicate_ids(caplog):
    caplog.set_level(logging.WARNING)
    data = normalize_initial_data(
        {
            "status": "success",
            "users": "not-a-list",
            "candidates": [{"candidate_name": "A"}, "junk"],
            "questions": [{"qid": "Q1", "high": 1}, {"qid": "Q1", "high": 2}],
        }
    )
    assert data.users == []
    assert len(data.candidates) == 1
    assert [question.score_high for question in data.questions] == [1]
    assert "duplicate question id" in caplog.text
