from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from skillpath.config import SCIWeights
from skillpath.freshness import calculate_freshness_score, days_since, utc_now
from skillpath.models import SCIBreakdown, SCIInterpretation, SCIResult, SkillProfileEntry
from skillpath.normalize import coerce_datetime, coerce_number, round_half_up

logger = logging.getLogger(__name__)

SCI_BANDS = (
    (80, SCIInterpretation("Expert", "green", "Strong, current skill confidence")),
    (60, SCIInterpretation("Proficient", "blue", "Good skill confidence")),
    (40, SCIInterpretation("Intermediate", "yellow", "Moderate skill confidence - consider reassessment")),
    (20, SCIInterpretation("Beginner", "orange", "Low confidence - skill may be outdated")),
)
UNVERIFIED = SCIInterpretation("Unverified", "red", "Very low confidence - reassessment needed")


class ConfidenceEngine:
    """Skill Confidence Index: weighted blend of assessment, freshness and scenario scores."""

    def __init__(self, weights: SCIWeights | None = None):
        self.weights = weights or SCIWeights()

    def compute(
        self,
        assessment_score: Any = 0,
        last_used_date: Any = None,
        scenario_score: Any = 0,
        now: Any = None,
    ) -> SCIResult:
        assessment = coerce_number(assessment_score)
        scenario = coerce_number(scenario_score)
        freshness = calculate_freshness_score(last_used_date, now)

        assessment_part = assessment * self.weights.assessment
        freshness_part = freshness * self.weights.freshness
        scenario_part = scenario * self.weights.scenario

        return SCIResult(
            sci=round_half_up(assessment_part + freshness_part + scenario_part, 2),
            breakdown=SCIBreakdown(
                assessment_score=assessment,
                assessment_contribution=assessment_part,
                freshness_score=freshness,
                freshness_contribution=freshness_part,
                scenario_score=scenario,
                scenario_contribution=scenario_part,
                weights=self.weights.as_dict(),
                last_used_date=last_used_date,
                days_ago=days_since(last_used_date, now),
            ),
        )

    def update(
        self,
        entry: SkillProfileEntry,
        assessment_score: Any = None,
        scenario_score: Any = None,
        now: Any = None,
    ) -> SkillProfileEntry:
        if entry is None:
            raise TypeError("update() requires an existing SkillProfileEntry")
        current = coerce_datetime(now) or utc_now()
        assessment = entry.assessment_score if assessment_score is None else assessment_score
        scenario = entry.scenario_score if scenario_score is None else scenario_score
        result = self.compute(assessment, entry.last_used_date, scenario, now=current)
        logger.debug("Recomputed SCI %.2f for %r", result.sci, entry.skill)

        return replace(
            entry,
            assessment_score=result.breakdown.assessment_score,
            scenario_score=result.breakdown.scenario_score,
            freshness_score=result.breakdown.freshness_score,
            sci=result.sci,
            last_assessed=current if assessment_score is not None else entry.last_assessed,
        )

    def new_entry(
        self,
        skill: Any,
        last_used_date: Any,
        self_rating: int = 3,
        category: str = "core",
        now: Any = None,
    ) -> SkillProfileEntry:
        """Profile entry for a newly added skill, scored on freshness alone until it is assessed."""
        if skill is None:
            raise TypeError("new_entry() requires a skill reference")
        entry = SkillProfileEntry(
            skill=skill,
            last_used_date=coerce_datetime(last_used_date),
            self_rating=self_rating,
            category=category,
        )
        return self.update(entry, now=now)

    def touch(
        self,
        entry: SkillProfileEntry,
        last_used_date: Any = None,
        self_rating: int | None = None,
        now: Any = None,
    ) -> SkillProfileEntry:
        """Apply a manual last-used date or self rating change and re-derive freshness and SCI."""
        if entry is None:
            raise TypeError("touch() requires an existing SkillProfileEntry")
        changed = replace(
            entry,
            last_used_date=entry.last_used_date if last_used_date is None else coerce_datetime(last_used_date),
            self_rating=entry.self_rating if self_rating is None else self_rating,
        )
        return self.update(changed, now=now)


def interpret_sci(sci: Any) -> SCIInterpretation:
    value = coerce_number(sci)
    for floor, interpretation in SCI_BANDS:
        if value >= floor:
            return interpretation
    return UNVERIFIED
