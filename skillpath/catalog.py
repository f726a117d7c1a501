from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from skillpath.models import Application, Candidate, Job, RequirementEntry, Role, SkillDefinition, SkillProfileEntry
from skillpath.normalize import coerce_datetime

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def _read_json(path: str | Path) -> Any:
    with Path(path).open("r", encoding="utf-8") as f:
        return json.load(f)


def _link_skill(raw: Any, skills_by_id: dict[str, SkillDefinition]) -> Any:
    if isinstance(raw, str) and raw in skills_by_id:
        return skills_by_id[raw]
    return raw


def load_skills(path: str | Path = DATA_DIR / "skills.json") -> list[SkillDefinition]:
    return [SkillDefinition.from_dict(item) for item in _read_json(path)["skills"]]


def load_roles(
    path: str | Path = DATA_DIR / "roles.json",
    skills: list[SkillDefinition] | None = None,
) -> list[Role]:
    skills_by_id = {skill.skill_id: skill for skill in skills or []}
    roles = [Role.from_dict(item) for item in _read_json(path)["roles"]]
    for role in roles:
        for requirement in role.requirements:
            requirement.skill = _link_skill(requirement.skill, skills_by_id)
    return roles


def _link_profile(entries: list[SkillProfileEntry], skills_by_id: dict[str, SkillDefinition]) -> list[SkillProfileEntry]:
    for entry in entries:
        entry.skill = _link_skill(entry.skill, skills_by_id)
        entry.last_used_date = coerce_datetime(entry.last_used_date)
    return entries


def profile_from_records(records: list[dict], skills: list[SkillDefinition] | None = None) -> list[SkillProfileEntry]:
    skills_by_id = {skill.skill_id: skill for skill in skills or []}
    return _link_profile([SkillProfileEntry.from_dict(item) for item in records], skills_by_id)


def load_profile(path: str | Path, skills: list[SkillDefinition] | None = None) -> list[SkillProfileEntry]:
    return profile_from_records(_read_json(path)["skills"], skills)


def load_candidates(
    path: str | Path = DATA_DIR / "candidates.json",
    skills: list[SkillDefinition] | None = None,
) -> list[Candidate]:
    skills_by_id = {skill.skill_id: skill for skill in skills or []}
    candidates = [Candidate.from_dict(item) for item in _read_json(path)["candidates"]]
    for candidate in candidates:
        candidate.skills = _link_profile(candidate.skills or [], skills_by_id)
    return candidates


def load_jobs(
    path: str | Path = DATA_DIR / "jobs.json",
    skills: list[SkillDefinition] | None = None,
) -> list[Job]:
    skills_by_id = {skill.skill_id: skill for skill in skills or []}
    jobs = []
    for item in _read_json(path)["jobs"]:
        requirements = [RequirementEntry.from_dict(req) for req in item.get("requiredSkills") or []]
        for requirement in requirements:
            requirement.skill = _link_skill(requirement.skill, skills_by_id)
        jobs.append(
            Job(
                job_id=str(item.get("_id") or item.get("id")),
                owner_id=str(item.get("companyId", "")),
                title=item.get("title", ""),
                description=item.get("description", ""),
                requirements=requirements,
                applications=[
                    Application(
                        candidate_id=str(app.get("candidateId")),
                        applied_at=coerce_datetime(app.get("appliedAt")),
                        skill_match_percentage=app.get("skillMatchPercentage"),
                        ranking=app.get("ranking"),
                    )
                    for app in item.get("applications") or []
                ],
                status=item.get("status", "open"),
            )
        )
    return jobs
