from __future__ import annotations

from typing import Any

import pandas as pd

from skillpath.models import HiringAnalytics, Job, TeamRiskReport
from skillpath.normalize import as_requirement, coerce_number, require_sequence, resolve_skill_ref, round_half_up

TOP_SKILLS = 10


def _requirement_rows(jobs: list[Job]) -> pd.DataFrame:
    rows = []
    for job in jobs:
        for raw in job.requirements:
            ref = resolve_skill_ref(as_requirement(raw).skill)
            if not ref.resolved:
                continue
            rows.append(
                {
                    "job_id": job.job_id,
                    "skill_id": ref.skill_id,
                    "skill_name": ref.display_name,
                    "applications": len(job.applications),
                    "match_total": sum(coerce_number(app.skill_match_percentage) for app in job.applications),
                }
            )
    return pd.DataFrame(rows, columns=["job_id", "skill_id", "skill_name", "applications", "match_total"])


def _risk_level(applications: int, jobs_requiring: int) -> str:
    if applications < jobs_requiring * 2:
        return "HIGH"
    if applications < jobs_requiring * 5:
        return "MEDIUM"
    return "LOW"


def team_skill_risk(jobs: Any) -> TeamRiskReport:
    jobs = require_sequence(jobs, "jobs")
    if not jobs:
        return TeamRiskReport(overall_risk="unknown", skill_risks=[], high_risk_count=0, recommendation="No jobs posted yet")

    frame = _requirement_rows(jobs)
    grouped = frame.groupby("skill_id", sort=False).agg(
        skill_name=("skill_name", "first"),
        jobs_requiring=("job_id", "count"),
        total_applications=("applications", "sum"),
        match_total=("match_total", "sum"),
    )

    skill_risks = []
    for _, row in grouped.iterrows():
        jobs_requiring = int(row["jobs_requiring"])
        applications = int(row["total_applications"])
        avg_match = row["match_total"] / applications if applications else 0.0
        skill_risks.append(
            {
                "skill_name": row["skill_name"],
                "jobs_requiring": jobs_requiring,
                "total_applications": applications,
                "applications_per_job": applications / jobs_requiring,
                "avg_match_percentage": int(round_half_up(avg_match)),
                "risk_level": _risk_level(applications, jobs_requiring),
            }
        )

    high = [risk["skill_name"] for risk in skill_risks if risk["risk_level"] == "HIGH"]
    if len(high) > 3:
        overall = "HIGH"
    elif len(high) > 1:
        overall = "MEDIUM"
    else:
        overall = "LOW"
    recommendation = (
        f"Consider broadening requirements or upskilling for: {', '.join(high)}"
        if high
        else "Team skill coverage looks healthy"
    )
    return TeamRiskReport(
        overall_risk=overall,
        skill_risks=skill_risks,
        high_risk_count=len(high),
        recommendation=recommendation,
    )


def hiring_analytics(jobs: Any) -> HiringAnalytics:
    jobs = require_sequence(jobs, "jobs")
    total_applications = sum(len(job.applications) for job in jobs)
    matches = pd.Series(
        [app.skill_match_percentage for job in jobs for app in job.applications],
        dtype="float64",
    )
    # unscored (None) and zero matches are left out of the average
    scored = matches[matches.fillna(0) > 0]
    avg_match = int(round_half_up(scored.mean())) if not scored.empty else 0

    demand = _requirement_rows(jobs)
    top_skills: list[tuple[str, int]] = []
    if not demand.empty:
        counts = demand.groupby("skill_name", sort=False).size()
        # stable sort keeps first-seen order among equally demanded skills
        counts = counts.sort_values(ascending=False, kind="stable").head(TOP_SKILLS)
        top_skills = [(str(name), int(count)) for name, count in counts.items()]

    return HiringAnalytics(
        total_jobs=len(jobs),
        open_jobs=sum(1 for job in jobs if job.status == "open"),
        closed_jobs=sum(1 for job in jobs if job.status == "closed"),
        total_applications=total_applications,
        avg_applications_per_job=int(round_half_up(total_applications / len(jobs))) if jobs else 0,
        avg_candidate_match_percentage=avg_match,
        top_skills_in_demand=top_skills,
    )
