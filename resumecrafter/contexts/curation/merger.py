"""
Merge engine for the curation context.

Combines a partial resume (from the LinkedIn parser, the extraction adapter or a
raw mapping) into the canonical record, in place, one field group at a time:

- contact: fill-only, a non-empty existing value is never overwritten
- summary: adopted only when the existing text is empty; variants untouched
- entry collections: appended unconditionally, with identifiers made unique
- skills: appended per group after dropping case-insensitive name duplicates

Field groups are independent. A raw mapping is normalized in full before any
group is applied, so malformed input never partially lands in the record.
"""

import copy
from dataclasses import dataclass, field, fields
from typing import Dict, List, Mapping, Tuple, Union

from resumecrafter.contexts.curation.record_normalizer import (
    ensure_unique_ids,
    fragment_from_dict,
)
from resumecrafter.contexts.curation.resume_schema import (
    ENTRY_COLLECTIONS,
    SKILL_GROUPS,
    Contact,
    ResumeFragment,
    ResumeRecord,
    SkillEntry,
    Summary,
    skill_key,
)


@dataclass
class MergeReport:
    """What a merge changed, per field group."""

    contact_fields_filled: List[str] = field(default_factory=list)
    summary_adopted: bool = False
    appended: Dict[str, int] = field(default_factory=dict)
    skills_added: Dict[str, int] = field(default_factory=dict)
    skills_skipped: Dict[str, int] = field(default_factory=dict)

    @property
    def total_added(self) -> int:
        return sum(self.appended.values()) + sum(self.skills_added.values())

    def describe(self) -> List[str]:
        """One human-readable line per field group that changed."""
        lines = []
        if self.contact_fields_filled:
            lines.append(f"Contact: filled {', '.join(self.contact_fields_filled)}")
        if self.summary_adopted:
            lines.append("Summary: adopted")
        for name, count in self.appended.items():
            if count:
                lines.append(f"{name.capitalize()}: +{count}")
        for group in SKILL_GROUPS:
            added = self.skills_added.get(group, 0)
            skipped = self.skills_skipped.get(group, 0)
            if added or skipped:
                lines.append(f"Skills ({group}): +{added}, {skipped} duplicate(s) skipped")
        return lines


def merge_contact(existing: Contact, incoming: Contact) -> List[str]:
    """Fill empty contact fields from incoming. Returns the names of filled fields."""
    filled = []
    for f in fields(Contact):
        value = getattr(incoming, f.name)
        if value and value.strip() and not getattr(existing, f.name).strip():
            setattr(existing, f.name, value)
            filled.append(f.name)
    return filled


def merge_summary(existing: Summary, incoming: Summary) -> bool:
    """Adopt the incoming summary text only if there is none yet."""
    if incoming.text.strip() and not existing.text.strip():
        existing.text = incoming.text
        return True
    return False


def append_entries(existing: list, incoming: list) -> int:
    """Append copies of incoming entries, re-identifying any that collide."""
    taken = {entry.id for entry in existing}
    bullets_taken = {b.id for entry in existing for b in getattr(entry, "bullets", [])}
    for entry in incoming:
        entry = copy.deepcopy(entry)
        ensure_unique_ids([entry], taken)
        if hasattr(entry, "bullets"):
            ensure_unique_ids(entry.bullets, bullets_taken)
        existing.append(entry)
    return len(incoming)


def merge_skills(existing: List[SkillEntry], incoming: List[SkillEntry]) -> Tuple[int, int]:
    """
    Append incoming skills whose normalized name is not in the group yet.

    Returns:
        (added, skipped) counts
    """
    names = {skill_key(skill.name) for skill in existing}
    taken = {skill.id for skill in existing}
    added = skipped = 0

    for skill in incoming:
        key = skill_key(skill.name)
        if not key or key in names:
            skipped += 1
            continue
        skill = copy.deepcopy(skill)
        ensure_unique_ids([skill], taken)
        existing.append(skill)
        names.add(key)
        added += 1

    return added, skipped


def merge_fragment(
    record: ResumeRecord, incoming: Union[ResumeFragment, Mapping]
) -> MergeReport:
    """
    Merge a partial resume into the canonical record in place.

    Args:
        record: Canonical record (mutated)
        incoming: ResumeFragment, or a raw mapping normalized via fragment_from_dict

    Returns:
        MergeReport describing the changes

    Raises:
        RecordShapeError: If a raw mapping does not match the schema shape
    """
    if not isinstance(incoming, ResumeFragment):
        incoming = fragment_from_dict(incoming)

    report = MergeReport()

    if incoming.contact is not None:
        report.contact_fields_filled = merge_contact(record.contact, incoming.contact)

    if incoming.summary is not None:
        report.summary_adopted = merge_summary(record.summary, incoming.summary)

    for name in ENTRY_COLLECTIONS:
        report.appended[name] = append_entries(record.collection(name), getattr(incoming, name))

    if incoming.skills is not None:
        for group in SKILL_GROUPS:
            added, skipped = merge_skills(record.skills.group(group), incoming.skills.group(group))
            report.skills_added[group] = added
            report.skills_skipped[group] = skipped

    return report
