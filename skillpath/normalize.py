"""Boundary normalisation for payloads assembled by the persistence layer."""
from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from typing import Any

from skillpath.models import Candidate, RequirementEntry, Role, SkillDefinition, SkillProfileEntry, SkillRef

logger = logging.getLogger(__name__)

ID_KEYS = ("_id", "id", "skill_id", "skillId")


def resolve_skill_ref(raw: Any) -> SkillRef:
    if raw is None:
        return SkillRef(None)
    if isinstance(raw, SkillRef):
        return raw
    if isinstance(raw, SkillDefinition):
        return SkillRef(raw.skill_id, raw.name)
    if isinstance(raw, Mapping):
        raw_id = next((raw[key] for key in ID_KEYS if raw.get(key) is not None), None)
        name = raw.get("name")
        if isinstance(raw_id, (Mapping, SkillRef, SkillDefinition)):
            nested = resolve_skill_ref(raw_id)
            return SkillRef(nested.skill_id, name or nested.name)
        return SkillRef(None if raw_id is None else str(raw_id), name)
    # opaque id objects such as UUIDs or ObjectIds are stringified
    if isinstance(raw, (bool, float, date, Iterable)) and not isinstance(raw, str):
        return SkillRef(None)
    text = str(raw).strip()
    return SkillRef(text or None)


def resolve_role_id(raw: Any) -> str | None:
    if raw is None:
        return None
    if isinstance(raw, Role):
        return raw.role_id
    if isinstance(raw, Mapping):
        raw_id = raw.get("_id", raw.get("id"))
        return None if raw_id is None else str(raw_id)
    return str(raw)


def coerce_number(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def coerce_datetime(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def round_half_up(value: float, digits: int = 0) -> float:
    scale = 10**digits
    return math.floor(value * scale + 0.5) / scale


def require_sequence(value: Any, name: str) -> list:
    if value is None or isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
        raise TypeError(f"{name} must be a sequence, got {type(value).__name__}")
    return list(value)


def as_profile_entry(raw: Any) -> SkillProfileEntry:
    if isinstance(raw, SkillProfileEntry):
        return raw
    if isinstance(raw, Mapping):
        return SkillProfileEntry.from_dict(raw)
    raise TypeError(f"profile entries must be SkillProfileEntry or mappings, got {type(raw).__name__}")


def as_requirement(raw: Any) -> RequirementEntry:
    if isinstance(raw, RequirementEntry):
        return raw
    if isinstance(raw, Mapping):
        return RequirementEntry.from_dict(raw)
    raise TypeError(f"requirements must be RequirementEntry or mappings, got {type(raw).__name__}")


def index_profile(profile: Any) -> dict[str, tuple[SkillRef, SkillProfileEntry]]:
    lookup: dict[str, tuple[SkillRef, SkillProfileEntry]] = {}
    for raw in require_sequence(profile, "profile"):
        entry = as_profile_entry(raw)
        ref = resolve_skill_ref(entry.skill)
        if not ref.resolved:
            logger.debug("Skipping profile entry with unresolved skill reference: %r", entry.skill)
            continue
        lookup[ref.skill_id] = (ref, entry)
    return lookup


def as_candidate(raw: Any) -> Candidate:
    if isinstance(raw, Candidate):
        return raw
    if isinstance(raw, Mapping):
        return Candidate.from_dict(raw)
    raise TypeError(f"candidates must be Candidate or mappings, got {type(raw).__name__}")


def as_role(raw: Any) -> Role:
    if isinstance(raw, Role):
        return raw
    if isinstance(raw, Mapping):
        return Role.from_dict(raw)
    raise TypeError(f"roles must be Role or mappings, got {type(raw).__name__}")
