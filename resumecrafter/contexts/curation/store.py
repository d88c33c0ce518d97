"""
Canonical record store (application state) for the curation context.

ResumeStore owns the one mutable master resume of a session. It is created
explicitly and injected wherever the record is read or changed; it never sees
the session's LLM configuration.

Lifecycle: load at init, save the whole record after every mutation (refreshing
meta.updatedAt), notify subscribers. Mutations are synchronous and
last-write-wins.
"""

import json
from functools import partialmethod
from typing import Callable, List, Mapping, Optional, Union

from resumecrafter.contexts.curation.exceptions import ImportFormatError, RecordShapeError
from resumecrafter.contexts.curation.logger import _log_debug, _log_info, _log_warning, log_merge_report
from resumecrafter.contexts.curation.merger import MergeReport, merge_fragment
from resumecrafter.contexts.curation.record_normalizer import (
    coerce_changes,
    ensure_unique_ids,
    record_from_dict,
    record_to_dict,
)
from resumecrafter.contexts.curation.resume_schema import (
    ENTRY_COLLECTIONS,
    ExperienceEntry,
    ResumeFragment,
    ResumeRecord,
    SkillEntry,
    create_empty_resume,
    create_skill_entry,
    skill_key,
)
from resumecrafter.contexts.curation.storage import JsonFileStorage
from resumecrafter.utils.timestamp import now_exact

STORAGE_KEY = "resumecrafter_master_resume"

Listener = Callable[[ResumeRecord], None]


class ResumeStore:
    """Session-owned master resume with save-after-every-mutation persistence."""

    def __init__(self, storage: JsonFileStorage, key: str = STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._listeners: List[Listener] = []
        self.resume = self._load()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _load(self) -> ResumeRecord:
        raw = self.storage.get(self.key)
        if raw is None:
            _log_debug("No stored master resume; starting from an empty record")
            return create_empty_resume()

        try:
            return record_from_dict(json.loads(raw))
        except (json.JSONDecodeError, RecordShapeError) as e:
            _log_warning(f"Stored master resume is unreadable ({e}); starting from an empty record")
            return create_empty_resume()

    def _save(self, touch: bool = True) -> None:
        if touch:
            self.resume.meta.updated_at = now_exact()
        self.storage.set(self.key, self.export_json())
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.resume)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every save. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def get_resume(self) -> ResumeRecord:
        return self.resume

    # =========================================================================
    # CONTACT & SUMMARY
    # =========================================================================

    def update_contact(self, **changes: str) -> None:
        for name, value in coerce_changes(type(self.resume.contact), changes).items():
            setattr(self.resume.contact, name, value)
        self._save()

    def update_summary(self, text: Optional[str] = None, variants: Optional[List[str]] = None) -> None:
        if text is not None:
            self.resume.summary.text = text
        if variants is not None:
            self.resume.summary.variants = list(variants)
        self._save()

    def adopt_summary_variant(self, text: str) -> None:
        """Make a generated summary current and keep it among the variants."""
        self.resume.summary.text = text
        self.resume.summary.variants.append(text)
        self._save()

    # =========================================================================
    # ENTRY COLLECTIONS
    # =========================================================================

    def find_entry(self, collection: str, entry_id: str):
        return next((e for e in self.resume.collection(collection) if e.id == entry_id), None)

    def add_entry(self, collection: str, entry=None):
        """Append an entry (a fresh empty one by default) and return it."""
        entries = self.resume.collection(collection)
        if entry is None:
            entry = ENTRY_COLLECTIONS[collection]()
        ensure_unique_ids([entry], {e.id for e in entries})
        _settle_entry(entry)
        entries.append(entry)
        self._save()
        return entry

    def update_entry(self, collection: str, entry_id: str, **changes) -> bool:
        """Update fields of one entry. Returns False if no entry has that id."""
        entry = self.find_entry(collection, entry_id)
        if entry is None:
            return False

        for name, value in coerce_changes(type(entry), changes).items():
            setattr(entry, name, value)
        _settle_entry(entry)

        self._save()
        return True

    def remove_entry(self, collection: str, entry_id: str) -> bool:
        entries = self.resume.collection(collection)
        remaining = [e for e in entries if e.id != entry_id]
        if len(remaining) == len(entries):
            return False
        setattr(self.resume, collection, remaining)
        self._save()
        return True

    add_experience = partialmethod(add_entry, "experience")
    update_experience = partialmethod(update_entry, "experience")
    remove_experience = partialmethod(remove_entry, "experience")

    add_education = partialmethod(add_entry, "education")
    update_education = partialmethod(update_entry, "education")
    remove_education = partialmethod(remove_entry, "education")

    add_certification = partialmethod(add_entry, "certifications")
    update_certification = partialmethod(update_entry, "certifications")
    remove_certification = partialmethod(remove_entry, "certifications")

    add_project = partialmethod(add_entry, "projects")
    update_project = partialmethod(update_entry, "projects")
    remove_project = partialmethod(remove_entry, "projects")

    add_award = partialmethod(add_entry, "awards")
    update_award = partialmethod(update_entry, "awards")
    remove_award = partialmethod(remove_entry, "awards")

    add_publication = partialmethod(add_entry, "publications")
    update_publication = partialmethod(update_entry, "publications")
    remove_publication = partialmethod(remove_entry, "publications")

    # =========================================================================
    # SKILLS
    # =========================================================================

    def add_skill(self, group: str, skill: Union[SkillEntry, str]) -> bool:
        """
        Add a skill unless the group already has one with the same name.

        Returns:
            True if added, False for an empty or duplicate name
        """
        if isinstance(skill, str):
            skill = create_skill_entry(skill.strip())

        skills = self.resume.skills.group(group)
        key = skill_key(skill.name)
        if not key or key in {skill_key(s.name) for s in skills}:
            return False

        ensure_unique_ids([skill], {s.id for s in skills})
        skills.append(skill)
        self._save()
        return True

    def remove_skill(self, group: str, skill_id: str) -> bool:
        skills = self.resume.skills.group(group)
        remaining = [s for s in skills if s.id != skill_id]
        if len(remaining) == len(skills):
            return False
        setattr(self.resume.skills, group, remaining)
        self._save()
        return True

    def update_skills(self, group: str, skills: List[SkillEntry]) -> None:
        """Replace a skill group, keeping the first of any same-name entries."""
        self.resume.skills.group(group)
        kept, names = [], set()
        for skill in skills:
            key = skill_key(skill.name)
            if key and key not in names:
                kept.append(skill)
                names.add(key)
        ensure_unique_ids(kept)
        setattr(self.resume.skills, group, kept)
        self._save()

    # =========================================================================
    # WHOLE-RECORD OPERATIONS
    # =========================================================================

    def merge(self, incoming: Union[ResumeFragment, Mapping], source: str = "import") -> MergeReport:
        """Merge a partial resume into the record, then persist and notify."""
        report = merge_fragment(self.resume, incoming)
        self._save()
        log_merge_report(source, report)
        return report

    def import_json(self, text: str) -> None:
        """
        Replace the record wholesale with a previously exported JSON document.

        The imported document keeps its own meta timestamps.

        Raises:
            ImportFormatError: If text is not a JSON object of the expected shape.
                The current record is left untouched.
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ImportFormatError(f"Invalid JSON file: {e.msg}") from e

        if not isinstance(data, dict):
            raise ImportFormatError("Invalid JSON file: master resume must be a JSON object")

        try:
            record = record_from_dict({**record_to_dict(create_empty_resume()), **data})
        except RecordShapeError as e:
            raise ImportFormatError(f"Invalid master resume: {e}") from e

        self.resume = record
        self._save(touch=False)
        _log_info(f"Imported master resume '{record.meta.name}'")

    def export_json(self) -> str:
        return json.dumps(record_to_dict(self.resume), indent=2, ensure_ascii=False)

    def reset(self) -> None:
        """Discard everything and start over from an empty record."""
        self.resume = create_empty_resume()
        self._save()
        _log_info("Master resume reset")


def _settle_entry(entry) -> None:
    """Upgrade bare-string bullets, make bullet ids unique and clear a current role's end date."""
    if hasattr(entry, "bullets"):
        entry.bullets = coerce_changes(type(entry), {"bullets": entry.bullets})["bullets"]
    if isinstance(entry, ExperienceEntry) and entry.current:
        entry.end_date = ""
