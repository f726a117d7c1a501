from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from skillpath.config import SCIWeights
from skillpath.confidence import ConfidenceEngine, interpret_sci
from skillpath.freshness import calculate_freshness_score, days_since
from skillpath.models import SkillProfileEntry

NOW = datetime(2026, 6, 1, 12, 0, 0)


def _days_ago(days: int) -> datetime:
    return NOW - timedelta(days=days)


def test_freshness_boundaries():
    assert calculate_freshness_score(_days_ago(29), NOW) == 100
    assert calculate_freshness_score(_days_ago(30), NOW) == 80
    assert calculate_freshness_score(_days_ago(31), NOW) == 80
    assert calculate_freshness_score(_days_ago(179), NOW) == 80
    assert calculate_freshness_score(_days_ago(180), NOW) == 50
    assert calculate_freshness_score(_days_ago(359), NOW) == 50
    assert calculate_freshness_score(_days_ago(366), NOW) == 20
    assert calculate_freshness_score(None, NOW) == 0


def test_freshness_partial_day_rounds_up():
    assert days_since(NOW - timedelta(days=29, hours=1), NOW) == 30
    assert calculate_freshness_score(NOW - timedelta(days=29, hours=1), NOW) == 80


def test_freshness_accepts_dates_strings_and_aware_datetimes():
    assert calculate_freshness_score(date(2026, 5, 25), NOW) == 100
    assert calculate_freshness_score("2026-05-25", NOW) == 100
    aware = datetime(2025, 1, 1, tzinfo=timezone.utc)
    assert calculate_freshness_score(aware, NOW) == 20
    assert calculate_freshness_score("not a date", NOW) == 0
    assert calculate_freshness_score(12345, NOW) == 0


def test_sci_end_to_end_value():
    result = ConfidenceEngine().compute(80, _days_ago(10), 70, now=NOW)
    assert result.breakdown.freshness_score == 100
    assert result.sci == 84.5
    assert result.breakdown.days_ago == 10
    assert result.breakdown.weights == {"assessment": 0.40, "freshness": 0.35, "scenario": 0.25}


@pytest.mark.parametrize(
    "assessment,days,scenario",
    [(0, 0, 0), (33.3, 45, 66.7), (100, 400, 100), (57, 200, 12), (91.25, 5, 48.5)],
)
def test_breakdown_sums_to_sci(assessment, days, scenario):
    result = ConfidenceEngine().compute(assessment, _days_ago(days), scenario, now=NOW)
    assert abs(result.breakdown.total - result.sci) <= 0.01


def test_alternate_weights_are_isolated():
    engine = ConfidenceEngine(SCIWeights(assessment=0.5, freshness=0.25, scenario=0.25))
    result = engine.compute(80, _days_ago(10), 70, now=NOW)
    assert result.sci == 82.5
    assert ConfidenceEngine().compute(80, _days_ago(10), 70, now=NOW).sci == 84.5


def test_invalid_weights_rejected():
    with pytest.raises(ValueError):
        SCIWeights(assessment=0.5, freshness=0.5, scenario=0.5)
    with pytest.raises(ValueError):
        SCIWeights(assessment=1.2, freshness=-0.2, scenario=0.0)


def test_sci_rounds_half_up():
    engine = ConfidenceEngine(SCIWeights(assessment=1.0, freshness=0.0, scenario=0.0))
    assert engine.compute(0.125, None, 0.0, now=NOW).sci == 0.13
    assert engine.compute(0.375, None, 0.0, now=NOW).sci == 0.38


def test_malformed_scores_default_to_zero():
    result = ConfidenceEngine().compute(None, None, "n/a", now=NOW)
    assert result.sci == 0
    assert result.breakdown.days_ago is None


def test_update_carries_over_and_preserves_fields():
    entry = SkillProfileEntry(
        skill="python",
        last_used_date=_days_ago(10),
        self_rating=4,
        assessment_score=60,
        scenario_score=50,
        category="tools",
    )
    updated = ConfidenceEngine().update(entry, scenario_score=70, now=NOW)
    assert updated.assessment_score == 60
    assert updated.scenario_score == 70
    assert updated.freshness_score == 100
    assert updated.sci == 76.5
    assert updated.last_assessed is None
    assert (updated.skill, updated.self_rating, updated.category) == ("python", 4, "tools")
    assert entry.sci == 0


def test_update_refreshes_last_assessed_only_on_new_assessment():
    entry = SkillProfileEntry(skill="sql", last_used_date=_days_ago(200), assessment_score=40)
    assessed = ConfidenceEngine().update(entry, assessment_score=90, now=NOW)
    assert assessed.last_assessed == NOW
    assert assessed.freshness_score == 50
    assert assessed.sci == 53.5


def test_update_is_idempotent():
    engine = ConfidenceEngine()
    entry = SkillProfileEntry(skill="git", last_used_date=_days_ago(40))
    once = engine.update(entry, 75, 65, now=NOW)
    twice = engine.update(once, 75, 65, now=NOW)
    assert once == twice


def test_update_rejects_missing_entry():
    with pytest.raises(TypeError):
        ConfidenceEngine().update(None, 50)


def test_interpretation_bands():
    assert interpret_sci(84.5).level == "Expert"
    assert interpret_sci(80).level == "Expert"
    assert interpret_sci(79.99).level == "Proficient"
    assert interpret_sci(40).level == "Intermediate"
    assert interpret_sci(20).level == "Beginner"
    assert interpret_sci(None).level == "Unverified"


def test_new_entry_is_scored_on_freshness_alone():
    entry = ConfidenceEngine().new_entry("rust", _days_ago(10).isoformat(), now=NOW)
    assert entry.last_used_date == _days_ago(10)
    assert (entry.self_rating, entry.category) == (3, "core")
    assert (entry.assessment_score, entry.scenario_score) == (0, 0)
    assert entry.freshness_score == 100
    assert entry.sci == 35
    assert entry.last_assessed is None


def test_new_entry_requires_skill():
    with pytest.raises(TypeError):
        ConfidenceEngine().new_entry(None, NOW)


def test_touch_recomputes_when_last_used_date_moves():
    engine = ConfidenceEngine()
    assessed_at = datetime(2026, 1, 5)
    entry = engine.update(
        SkillProfileEntry(skill="go", last_used_date=_days_ago(3), assessment_score=80, scenario_score=60, last_assessed=assessed_at),
        now=NOW,
    )
    assert entry.sci == 82

    stale = engine.touch(entry, last_used_date=_days_ago(400), now=NOW)
    assert stale.freshness_score == 20
    assert stale.sci == 54
    assert stale.last_assessed == assessed_at

    rated = engine.touch(stale, self_rating=5, now=NOW)
    assert rated.self_rating == 5
    assert rated.last_used_date == _days_ago(400)
    assert rated.sci == 54


def test_touch_rejects_missing_entry():
    with pytest.raises(TypeError):
        ConfidenceEngine().touch(None, NOW)
