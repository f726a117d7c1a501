from __future__ import annotations

import logging
from typing import Any

from skillpath.config import DEFAULT_CONFIG, EngineConfig
from skillpath.gap_analysis import BANDS, analyze_skill_gap
from skillpath.models import CareerPathNode, Role, RoleRecommendation, RoleRecommendations
from skillpath.normalize import as_role, require_sequence, resolve_role_id
from skillpath.ranking import fan_out

logger = logging.getLogger(__name__)


def _recommend_one(profile: list, role: Role, config: EngineConfig) -> RoleRecommendation:
    gap = analyze_skill_gap(profile, role.requirements or [], config)
    return RoleRecommendation(
        role_id=role.role_id,
        title=role.title,
        description=role.description,
        avg_salary=role.avg_salary,
        readiness_percentage=gap.readiness_percentage,
        missing_count=len(gap.missing_skills),
        weak_count=len(gap.weak_skills),
        strong_count=len(gap.strong_skills),
        overall_assessment=gap.overall_assessment,
        band=gap.band,
        next_roles=list(role.next_roles or []),
    )


def recommend_roles(
    profile: Any,
    roles: Any,
    config: EngineConfig | None = None,
    max_workers: int | None = None,
) -> RoleRecommendations:
    config = config or DEFAULT_CONFIG
    entries = require_sequence(profile, "profile")
    catalog = [as_role(role) for role in require_sequence(roles, "roles")]
    workers = config.max_workers if max_workers is None else max_workers

    recommendations = fan_out(lambda role: _recommend_one(entries, role, config), catalog, workers)
    recommendations.sort(key=lambda r: r.readiness_percentage, reverse=True)

    categorized: dict[str, list[RoleRecommendation]] = {band: [] for band in BANDS}
    for rec in recommendations:
        categorized[rec.band].append(rec)
    return RoleRecommendations(all=recommendations, categorized=categorized)


def _node(role: Role, children: list[CareerPathNode], cycle: bool = False) -> CareerPathNode:
    return CareerPathNode(
        role_id=role.role_id,
        title=role.title,
        description=role.description,
        requirements=list(role.requirements or []),
        children=children,
        avg_salary=role.avg_salary,
        cycle=cycle,
    )


def build_career_path(
    start_role: Any,
    roles: Any,
    max_depth: int | None = None,
    config: EngineConfig | None = None,
) -> CareerPathNode | None:
    config = config or DEFAULT_CONFIG
    depth = config.career_path_depth if max_depth is None else max_depth
    role_map = {role.role_id: role for role in map(as_role, require_sequence(roles, "roles"))}
    if start_role is None or depth < 0:
        return None
    start_role = as_role(start_role)

    def expand(role: Role, remaining: int, path: frozenset[str]) -> CareerPathNode:
        if remaining <= 0:
            return _node(role, [])
        children = []
        for raw in role.next_roles or []:
            next_id = resolve_role_id(raw)
            next_role = role_map.get(next_id) if next_id is not None else None
            if next_role is None:
                logger.debug("Dropping unresolved next role %r from %s", raw, role.title)
                continue
            if next_role.role_id in path:
                children.append(_node(next_role, [], cycle=True))
                continue
            children.append(expand(next_role, remaining - 1, path | {next_role.role_id}))
        return _node(role, children)

    return expand(start_role, depth, frozenset({start_role.role_id}))
