from __future__ import annotations

from datetime import datetime
from uuid import uuid4

import pytest

from skillpath.matching import calculate_skill_match
from skillpath.models import RequirementEntry, SkillProfileEntry, SkillRef

NOW = datetime(2026, 6, 1)


def _entry(skill, sci: float) -> SkillProfileEntry:
    return SkillProfileEntry(skill=skill, last_used_date=NOW, sci=sci, freshness_score=100)


def _job_requirements() -> list[RequirementEntry]:
    return [
        RequirementEntry(SkillRef("js", "JavaScript"), minimum_sci=70, importance=5),
        RequirementEntry(SkillRef("react", "React"), minimum_sci=65, importance=4),
        RequirementEntry(SkillRef("git", "Git"), minimum_sci=50, importance=2),
    ]


def test_missing_every_skill_is_zero():
    result = calculate_skill_match([_entry("python", 99)], _job_requirements())
    assert result.match_percentage == 0
    assert result.total_score == 0
    assert result.max_possible_score == 1100
    assert {item.status for item in result.breakdown} == {"missing"}


def test_perfect_sci_is_hundred():
    profile = [_entry("js", 100), _entry("react", 100), _entry("git", 100)]
    result = calculate_skill_match(profile, _job_requirements())
    assert result.match_percentage == 100
    assert result.total_score == pytest.approx(result.max_possible_score)


def test_importance_weighted_breakdown():
    profile = [_entry("js", 89), _entry("react", 60)]
    result = calculate_skill_match(profile, _job_requirements())
    # (5*89 + 4*60) / 1100 = 62.27
    assert result.match_percentage == 62
    assert result.total_score == pytest.approx(685)
    assert [(i.skill_name, i.status) for i in result.breakdown] == [
        ("JavaScript", "meets"),
        ("React", "below"),
        ("Git", "missing"),
    ]
    assert result.breakdown[0].score == pytest.approx(445)
    assert result.breakdown[0].max_score == 500
    assert result.breakdown[0].freshness_score == 100


def test_defaults_for_importance_and_min_sci():
    result = calculate_skill_match([_entry("a", 50)], [RequirementEntry("a")])
    item = result.breakdown[0]
    assert item.importance == 3
    assert item.min_sci == 50
    assert item.status == "meets"
    assert result.match_percentage == 50


def test_zero_max_possible_is_zero_percent():
    assert calculate_skill_match([_entry("a", 80)], []).match_percentage == 0
    result = calculate_skill_match([_entry("a", 80)], [RequirementEntry("a", importance=0)])
    assert result.max_possible_score == 0
    assert result.match_percentage == 0


def test_percentage_rounds_half_up():
    # 2.5 / 100 * 100 = 2.5 -> 3
    result = calculate_skill_match([_entry("a", 2.5)], [RequirementEntry("a", importance=1)])
    assert result.match_percentage == 3


def test_absent_profile_scores_zero_but_requirements_are_mandatory():
    assert calculate_skill_match(None, _job_requirements()).match_percentage == 0
    with pytest.raises(TypeError):
        calculate_skill_match([], None)


def test_joined_skill_records_are_accepted():
    profile = [{"skillId": {"_id": "js", "name": "JavaScript"}, "lastUsedDate": "2026-05-20", "sci": 80}]
    reqs = [{"skillId": {"_id": "js"}, "importance": 5, "minSCI": 70}]
    result = calculate_skill_match(profile, reqs)
    assert result.breakdown[0].skill_name == "JavaScript"
    assert result.match_percentage == 80


def test_uuid_skill_ids_match():
    skill_id = uuid4()
    result = calculate_skill_match([_entry(skill_id, 90)], [RequirementEntry(skill_id, 60, 2)])
    assert result.max_possible_score == 200
    assert result.match_percentage == 90


def test_totals_accumulate_in_requirement_order():
    scis = [0.1, 33.3, 71.7, 12.9, 0.3, 98.6, 45.45, 7.7, 66.6, 0.2, 19.9, 88.8]
    importances = [3, 1, 5, 2, 4, 3, 1, 5, 2, 4, 1, 3]
    profile = [_entry(f"s{i}", sci) for i, sci in enumerate(scis)]
    reqs = [RequirementEntry(f"s{i}", 0, importance) for i, importance in enumerate(importances)]
    result = calculate_skill_match(profile, reqs)

    running = 0.0
    for importance, sci in zip(importances, scis):
        running += importance * sci
    assert result.total_score == running
    assert result.total_score == sum(item.score for item in result.breakdown)
