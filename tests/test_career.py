from __future__ import annotations

from datetime import datetime

import pytest

from skillpath.career import build_career_path, recommend_roles
from skillpath.catalog import load_roles, load_skills
from skillpath.models import RequirementEntry, Role, SkillProfileEntry

NOW = datetime(2026, 6, 1)


def _role(role_id: str, *next_roles, requirements=None) -> Role:
    return Role(
        role_id=role_id,
        title=role_id.upper(),
        requirements=requirements or [],
        next_roles=list(next_roles),
        description=f"{role_id} role",
    )


def _shape(node):
    if node is None:
        return None
    label = node.role_id + ("*" if node.cycle else "")
    return (label, [_shape(child) for child in node.children])


def test_chain_respects_max_depth():
    a, b, c, d = _role("a", "b"), _role("b", "c"), _role("c", "d"), _role("d")
    tree = build_career_path(a, [a, b, c, d], max_depth=2)
    assert _shape(tree) == ("a", [("b", [("c", [])])])
    assert tree.depth() == 3
    assert tree.children[0].title == "B"


def test_depth_zero_is_root_only_and_negative_is_none():
    a, b = _role("a", "b"), _role("b")
    assert _shape(build_career_path(a, [a, b], max_depth=0)) == ("a", [])
    assert build_career_path(a, [a, b], max_depth=-1) is None
    assert build_career_path(None, [a, b]) is None


def test_unresolved_next_roles_are_dropped():
    a = _role("a", "missing", None, "b")
    b = _role("b")
    assert _shape(build_career_path(a, [a, b], max_depth=3)) == ("a", [("b", [])])


def test_next_roles_accept_objects_and_mappings():
    b, c = _role("b"), _role("c")
    a = _role("a", b, {"_id": "c"})
    assert _shape(build_career_path(a, [a, b, c], max_depth=1)) == ("a", [("b", []), ("c", [])])


def test_cycles_are_marked_not_expanded():
    a, b, c = _role("a", "b"), _role("b", "c", "a"), _role("c", "c")
    tree = build_career_path(a, [a, b, c], max_depth=10)
    assert _shape(tree) == ("a", [("b", [("c", [("c*", [])]), ("a*", [])])])


def test_diamond_graph_repeats_shared_successor():
    a, b, c, d = _role("a", "b", "c"), _role("b", "d"), _role("c", "d"), _role("d")
    tree = build_career_path(a, [a, b, c, d], max_depth=3)
    assert _shape(tree) == ("a", [("b", [("d", [])]), ("c", [("d", [])])])


def test_default_depth_from_config():
    roles = [_role(str(i), str(i + 1)) for i in range(6)]
    assert build_career_path(roles[0], roles).depth() == 4


def test_recommend_roles_buckets_and_orders():
    profile = [
        SkillProfileEntry(skill="js", last_used_date=NOW, sci=80),
        SkillProfileEntry(skill="sql", last_used_date=NOW, sci=40),
    ]
    roles = [
        _role("data", requirements=[RequirementEntry("sql", 60), RequirementEntry("py", 60)]),
        _role("web", requirements=[RequirementEntry("js", 70)]),
        _role("mixed", requirements=[RequirementEntry("js", 60), RequirementEntry("sql", 60)]),
        _role("open"),
    ]
    recs = recommend_roles(profile, roles)
    assert [r.role_id for r in recs.all] == ["web", "open", "mixed", "data"]
    assert [r.role_id for r in recs.categorized["ready"]] == ["web", "open"]
    assert [r.role_id for r in recs.categorized["developing"]] == ["mixed"]
    assert [r.role_id for r in recs.categorized["long_term"]] == ["data"]
    assert recs.categorized["nearly_ready"] == []
    data = recs.all[-1]
    assert (data.missing_count, data.weak_count, data.strong_count) == (1, 1, 0)


def test_role_mappings_are_accepted():
    roles = [
        {"_id": "jr", "title": "Junior", "nextRoles": [{"_id": "sr"}], "requiredSkills": [{"skillId": "js", "minimumSCI": 60}]},
        {"_id": "sr", "title": "Senior", "nextRoles": ["jr"]},
    ]
    tree = build_career_path(roles[0], roles, max_depth=2)
    assert _shape(tree) == ("jr", [("sr", [("jr*", [])])])
    assert tree.title == "Junior"

    profile = [SkillProfileEntry(skill="js", last_used_date=NOW, sci=70)]
    recs = recommend_roles(profile, roles)
    assert [(r.role_id, r.readiness_percentage) for r in recs.all] == [("jr", 100), ("sr", 100)]


def test_recommend_roles_requires_role_list():
    with pytest.raises(TypeError):
        recommend_roles([], None)


def test_sample_catalog_paths():
    roles = load_roles(skills=load_skills())
    by_id = {role.role_id: role for role in roles}
    tree = build_career_path(by_id["frontend"], roles)
    assert _shape(tree) == ("frontend", [("fullstack", [("techlead", [])])])
    assert tree.requirements[0].skill.name == "JavaScript"

    profile = [SkillProfileEntry(skill="python", last_used_date=NOW, sci=70)]
    recs = recommend_roles(profile, roles, max_workers=3)
    assert recs.all[0].title == "Data Analyst"
    assert recs.all[0].readiness_percentage == 33
