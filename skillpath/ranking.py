from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from typing import Any, Callable, Iterable, TypeVar

from skillpath.config import DEFAULT_CONFIG, EngineConfig
from skillpath.matching import calculate_skill_match
from skillpath.models import Candidate, Job, RankedCandidate
from skillpath.normalize import as_candidate, coerce_number, require_sequence

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


def fan_out(func: Callable[[T], R], items: Iterable[T], max_workers: int | None = None) -> list[R]:
    items = list(items)
    if not max_workers or max_workers <= 1 or len(items) <= 1:
        return [func(item) for item in items]
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(func, items))


def _score_candidate(candidate: Candidate, requirements: list, config: EngineConfig) -> RankedCandidate:
    result = calculate_skill_match(candidate.skills or [], requirements, config)
    return RankedCandidate(
        candidate_id=candidate.candidate_id,
        candidate_name=candidate.name or "Unknown",
        candidate_email=candidate.email,
        match_percentage=result.match_percentage,
        total_score=result.total_score,
        breakdown=result.breakdown,
        experience=coerce_number(candidate.experience),
    )


def rank_candidates(
    candidates: Any,
    requirements: Any,
    config: EngineConfig | None = None,
    max_workers: int | None = None,
) -> list[RankedCandidate]:
    config = config or DEFAULT_CONFIG
    pool = [as_candidate(c) for c in require_sequence(candidates, "candidates")]
    reqs = require_sequence(requirements, "requirements")
    workers = config.max_workers if max_workers is None else max_workers
    logger.debug("Ranking %d candidates against %d requirements", len(pool), len(reqs))

    scored = fan_out(lambda c: _score_candidate(c, reqs, config), pool, workers)
    # sorted() is stable, so equal keys keep input order
    ranked = sorted(scored, key=lambda c: (-c.match_percentage, -c.experience))
    for position, candidate in enumerate(ranked, start=1):
        candidate.ranking = position
    return ranked


def explain_ranking(candidate: RankedCandidate) -> str:
    meets = sum(1 for item in candidate.breakdown if item.status == "meets")
    below = sum(1 for item in candidate.breakdown if item.status == "below")
    missing = sum(1 for item in candidate.breakdown if item.status == "missing")

    parts = [f"Ranked #{candidate.ranking} with {candidate.match_percentage}% skill match."]
    if meets:
        parts.append(f"Meets requirements for {meets} skill(s).")
    if below:
        parts.append(f"{below} skill(s) below required threshold.")
    if missing:
        parts.append(f"Missing {missing} required skill(s).")
    return " ".join(parts)


def score_applications(job: Job, candidates: Any, config: EngineConfig | None = None) -> Job:
    by_id = {c.candidate_id: c for c in map(as_candidate, require_sequence(candidates, "candidates"))}
    # a candidate applies once; repeat records are dropped, first one wins
    seen: set[str] = set()
    applications = []
    for app in job.applications:
        if app.candidate_id in seen:
            logger.warning("Dropping repeat application from %s on job %s", app.candidate_id, job.job_id)
            continue
        seen.add(app.candidate_id)
        applications.append(app)

    applicants = [by_id.get(app.candidate_id) or Candidate(candidate_id=app.candidate_id) for app in applications]
    ranked = {r.candidate_id: r for r in rank_candidates(applicants, job.requirements, config)}
    scored = [
        replace(
            app,
            skill_match_percentage=ranked[app.candidate_id].match_percentage,
            ranking=ranked[app.candidate_id].ranking,
        )
        for app in applications
    ]
    return replace(job, applications=scored)
