from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable

from skillpath.confidence import ConfidenceEngine
from skillpath.models import AssessmentOutcome, QuestionResult, SkillDefinition, SkillProfileEntry

logger = logging.getLogger(__name__)


def _answer_pairs(answers: Iterable[Any]) -> list[tuple[str, str]]:
    pairs = []
    for answer in answers:
        if isinstance(answer, Mapping):
            question_id = answer.get("questionId", answer.get("question_id"))
            user_answer = answer.get("userAnswer", answer.get("answer"))
        else:
            question_id, user_answer = answer
        pairs.append((str(question_id), "" if user_answer is None else str(user_answer)))
    return pairs


def grade_assessment(skill: SkillDefinition, answers: Iterable[Any]) -> AssessmentOutcome:
    if answers is None:
        raise TypeError("grade_assessment() requires a list of answers")
    questions = {q.question_id: q for q in skill.questions}
    total = 0.0
    earned = 0.0
    results: list[QuestionResult] = []

    for question_id, user_answer in _answer_pairs(answers):
        question = questions.get(question_id)
        if question is None:
            logger.debug("Ignoring answer to unknown question %s for %s", question_id, skill.name)
            continue
        total += question.points
        is_correct = user_answer == question.correct_answer
        if is_correct:
            earned += question.points
        results.append(QuestionResult(question_id=question_id, user_answer=user_answer, is_correct=is_correct))

    score = earned / total * 100 if total > 0 else 0.0
    # scenario questions are graded with the rest, so the overall score stands in for them
    return AssessmentOutcome(
        skill_id=skill.skill_id,
        score_percentage=score,
        earned_points=earned,
        total_points=total,
        scenario_score=score,
        results=results,
    )


def apply_assessment(
    engine: ConfidenceEngine,
    entry: SkillProfileEntry,
    outcome: AssessmentOutcome,
    now: Any = None,
) -> SkillProfileEntry:
    return engine.update(entry, outcome.score_percentage, outcome.scenario_score, now=now)
