"""
Typed normalization of untrusted resume data.

Converts mappings from LLM payloads, external exports and JSON imports into
schema dataclasses. The pass follows the fixed schema shape: every field is
coerced according to its declared type, bare-string bullets and skills are
upgraded to structured entries, and identifiers are filled in or replaced so
that they are unique within each collection.

Design principle: resolve loose input once, at the boundary. Everything
downstream (merge engine, store, tailoring) sees only structured entries.
"""

from dataclasses import fields
from typing import Any, Iterable, List, Mapping, Optional, Set, Type, TypeVar

from resumecrafter.contexts.curation.exceptions import RecordShapeError
from resumecrafter.contexts.curation.resume_schema import (
    ENTRY_COLLECTIONS,
    SCHEMA_VERSION,
    SKILL_GROUPS,
    BulletPoint,
    Contact,
    ExperienceEntry,
    ResumeFragment,
    ResumeMeta,
    ResumeRecord,
    SkillEntry,
    SkillGroups,
    Summary,
    as_json_dict,
    json_key,
    new_id,
)

T = TypeVar("T")

_TRUE_STRINGS = {"true", "yes", "1"}


# =============================================================================
# SCALAR COERCION
# =============================================================================


def _string(value: Any, path: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, int, float)):
        return str(value)
    raise RecordShapeError(f"Expected text, got {type(value).__name__}", path=path)


def _string_list(value: Any, path: str) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, list):
        return [_string(item, f"{path}[{i}]") for i, item in enumerate(value)]
    raise RecordShapeError(f"Expected a list of text, got {type(value).__name__}", path=path)


def _bool(value: Any, path: str) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    raise RecordShapeError(f"Expected true/false, got {type(value).__name__}", path=path)


def _mapping(value: Any, path: str) -> Mapping:
    if not isinstance(value, Mapping):
        raise RecordShapeError(f"Expected an object, got {type(value).__name__}", path=path)
    return value


def _list(value: Any, path: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise RecordShapeError(f"Expected a list, got {type(value).__name__}", path=path)
    return value


# =============================================================================
# IDENTIFIERS
# =============================================================================


def ensure_unique_ids(entries: Iterable, taken: Optional[Set[str]] = None) -> Set[str]:
    """
    Give every entry a non-empty identifier not already in `taken`.

    Entries keep their identifier when it is free; missing or colliding ones get
    a fresh one. Updates and returns the set of identifiers in use.
    """
    if taken is None:
        taken = set()
    for entry in entries:
        if not entry.id or entry.id in taken:
            entry.id = new_id()
        taken.add(entry.id)
    return taken


# =============================================================================
# ENTITIES
# =============================================================================


def _coerce(cls: type, f, raw: Any, path: str) -> Any:
    if f.type is str:
        return _string(raw, path)
    if f.type is bool:
        return _bool(raw, path)
    if f.type == List[str]:
        return _string_list(raw, path)
    if f.type == List[BulletPoint]:
        return normalize_bullets(raw, path)
    raise TypeError(f"No coercion for {cls.__name__}.{f.name} ({f.type})")


def _build_entity(cls: Type[T], data: Any, path: str) -> T:
    """Build one schema dataclass from a mapping, coercing each field by its declared type."""
    data = _mapping(data, path)
    values = {}

    for f in fields(cls):
        key = json_key(f)
        if key in data:
            values[f.name] = _coerce(cls, f, data[key], f"{path}.{key}")

    entity = cls(**values)

    if isinstance(entity, ExperienceEntry) and entity.current:
        entity.end_date = ""

    return entity


def coerce_changes(cls: type, changes: Mapping[str, Any]) -> dict:
    """
    Coerce attribute edits for an entity of type `cls` by their declared types.

    Used for in-place edits, which bypass _build_entity: bare-string bullets are
    upgraded and bullet identifiers made unique.

    Args:
        cls: Schema dataclass the edits target
        changes: Attribute name -> new value

    Returns:
        New dict of coerced values

    Raises:
        ValueError: If a name is not a field of `cls`
        RecordShapeError: If a value has the wrong shape
    """
    by_name = {f.name: f for f in fields(cls)}
    unknown = set(changes) - set(by_name)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(sorted(unknown))}")

    return {
        name: _coerce(cls, by_name[name], value, f"$.{json_key(by_name[name])}")
        for name, value in changes.items()
    }


def normalize_bullet(value: Any, path: str = "$") -> BulletPoint:
    """Upgrade a bare-string bullet, or normalize a bullet mapping."""
    if isinstance(value, BulletPoint):
        return value
    if isinstance(value, str):
        return BulletPoint(text=value)
    return _build_entity(BulletPoint, value, path)


def normalize_bullets(value: Any, path: str = "$") -> List[BulletPoint]:
    # A single description string is one bullet
    if isinstance(value, str):
        value = [value] if value else []
    bullets = [normalize_bullet(item, f"{path}[{i}]") for i, item in enumerate(_list(value, path))]
    ensure_unique_ids(bullets)
    return bullets


def normalize_skill(value: Any, path: str = "$") -> SkillEntry:
    """Upgrade a bare skill name to a default-proficiency entry, or normalize a mapping."""
    if isinstance(value, str):
        return SkillEntry(name=value.strip())
    return _build_entity(SkillEntry, value, path)


def normalize_entries(cls: Type[T], value: Any, path: str = "$") -> List[T]:
    """Normalize a list of entries of one type with collection-unique identifiers."""
    entries = [_build_entity(cls, item, f"{path}[{i}]") for i, item in enumerate(_list(value, path))]
    ensure_unique_ids(entries)
    return entries


def normalize_skill_groups(value: Any, path: str = "$.skills") -> SkillGroups:
    data = _mapping(value, path)
    groups = SkillGroups()
    for group_name in SKILL_GROUPS:
        group_path = f"{path}.{group_name}"
        skills = [
            normalize_skill(item, f"{group_path}[{i}]")
            for i, item in enumerate(_list(data.get(group_name), group_path))
        ]
        ensure_unique_ids(skills)
        setattr(groups, group_name, skills)
    return groups


def normalize_summary(value: Any, path: str = "$.summary") -> Summary:
    if isinstance(value, str):
        return Summary(text=value)
    return _build_entity(Summary, value, path)


# =============================================================================
# AGGREGATES
# =============================================================================


def fragment_from_dict(data: Any) -> ResumeFragment:
    """
    Normalize a partial resume mapping (LLM payload, external export) into a fragment.

    Raises:
        RecordShapeError: If any known field has the wrong shape
    """
    data = _mapping(data, "$")
    fragment = ResumeFragment()

    if data.get("contact") is not None:
        fragment.contact = _build_entity(Contact, data["contact"], "$.contact")
    if data.get("summary") is not None:
        fragment.summary = normalize_summary(data["summary"])
    if data.get("skills") is not None:
        fragment.skills = normalize_skill_groups(data["skills"])

    for name, cls in ENTRY_COLLECTIONS.items():
        setattr(fragment, name, normalize_entries(cls, data.get(name), f"$.{name}"))

    return fragment


def record_from_dict(data: Any) -> ResumeRecord:
    """
    Normalize a complete master resume mapping (JSON import) into a record.

    Missing groups fall back to empty defaults. Identifiers that are present
    and unique are preserved, so record_from_dict(record_to_dict(r)) == r.

    Raises:
        RecordShapeError: If any known field has the wrong shape
    """
    data = _mapping(data, "$")
    record = ResumeRecord(version=_string(data.get("version", SCHEMA_VERSION), "$.version"))

    if data.get("meta") is not None:
        record.meta = _build_entity(ResumeMeta, data["meta"], "$.meta")
    if data.get("contact") is not None:
        record.contact = _build_entity(Contact, data["contact"], "$.contact")
    if data.get("summary") is not None:
        record.summary = normalize_summary(data["summary"])
    if data.get("skills") is not None:
        record.skills = normalize_skill_groups(data["skills"])

    for name, cls in ENTRY_COLLECTIONS.items():
        setattr(record, name, normalize_entries(cls, data.get(name), f"$.{name}"))

    return record


def record_to_dict(record: ResumeRecord) -> dict:
    """Export a record to its JSON layout."""
    return as_json_dict(record)
