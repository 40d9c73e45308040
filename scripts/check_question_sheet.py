from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any

PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_ROOT = PROJECT_ROOT / "backend"
sys.path.append(str(BACKEND_ROOT))

from app.clients.sheet_api import SheetApiClient
from app.config import SCORE_STRATEGIES, SettingsError, load_settings
from app.models.directory import DirectoryData
from app.models.evaluation import LEVELS
from app.repositories.directory_repository import DirectoryRepository
from app.services.scoring import ScoringPolicy, compute_max, group_by_category, resolve_score


def _report(data: DirectoryData, policy: ScoringPolicy) -> dict[str, Any]:
    categories = []
    for category, questions in group_by_category(data.questions).items():
        categories.append(
            {
                "category": category or "(uncategorized)",
                "questions": [
                    {
                        "id": question.id,
                        "question": question.question,
                        "scores": {
                            level: resolve_score(question, level, policy.strategy)
                            for level in LEVELS
                        },
                    }
                    for question in questions
                ],
            }
        )
    max_score = compute_max(data.questions, policy.strategy)
    return {
        "strategy": policy.strategy,
        "threshold": policy.threshold,
        "maxScore": max_score,
        "reachable": max_score >= policy.threshold,
        "users": len(data.users),
        "candidates": len(data.candidates),
        "categories": categories,
    }


def _format(report: dict[str, Any]) -> str:
    lines = []
    for group in report["categories"]:
        lines.append(group["category"])
        for question in group["questions"]:
            scores = " / ".join(
                f"{level} {question['scores'][level]:g}" for level in LEVELS
            )
            lines.append(f"  [{question['id']}] {question['question']} ({scores})")
    lines.append(
        f"Max score {report['maxScore']:g} | pass threshold {report['threshold']:g} "
        f"| strategy {report['strategy']}"
    )
    if not report["reachable"]:
        lines.append("WARNING: pass threshold is above the maximum attainable score")
    lines.append(f"{report['users']} users, {report['candidates']} candidates")
    return "\n".join(lines)


async def _run(strategy: str | None, threshold: float | None, as_json: bool) -> int:
    try:
        settings = load_settings()
    except SettingsError as exc:
        raise ValueError(str(exc)) from exc

    policy = ScoringPolicy(
        threshold=settings.pass_threshold if threshold is None else threshold,
        strategy=strategy or settings.score_strategy,
    )
    client = SheetApiClient(
        url=settings.sheet_api_url,
        timeout=settings.sheet_api_timeout_seconds,
        retries=settings.sheet_api_retries,
    )
    try:
        data = await DirectoryRepository(client).load()
    finally:
        await client.close()

    report = _report(data, policy)
    if as_json:
        print(json.dumps(report, ensure_ascii=False, indent=2))
    else:
        print(_format(report))
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Show the question sheet as the evaluation form will score it"
    )
    parser.add_argument("--strategy", choices=sorted(SCORE_STRATEGIES))
    parser.add_argument("--threshold", type=float)
    parser.add_argument("--json", action="store_true", dest="as_json")
    args = parser.parse_args()

    try:
        return asyncio.run(_run(args.strategy, args.threshold, args.as_json))
    except Exception as exc:
        print(f"Check failed: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
