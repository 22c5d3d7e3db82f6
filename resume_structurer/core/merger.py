"""
Merge the heuristic record with the normalized AI record.

- contact: per subfield, a non-empty AI value overwrites the heuristic one
- list sections: a non-empty AI list replaces the heuristic list wholesale
  (the two are never concatenated, to avoid near-duplicate entries)
- summary: a non-empty AI summary replaces the heuristic one

Without AI data the heuristic record is returned unchanged.
"""

from typing import Any, Dict, Optional

from resume_structurer.core.schemas import LIST_SECTIONS, ParsedResume


def merge_results(heuristic: ParsedResume, ai: Optional[ParsedResume]) -> ParsedResume:
    if ai is None:
        return heuristic

    contact_update = {
        field: value
        for field, value in ai.contact.model_dump().items()
        if isinstance(value, str) and value.strip()
    }
    update: Dict[str, Any] = {"contact": heuristic.contact.model_copy(update=contact_update)}

    for section in LIST_SECTIONS + ("hobbies",):
        ai_items = getattr(ai, section)
        if ai_items:
            update[section] = list(ai_items)

    if ai.summary.strip():
        update["summary"] = ai.summary

    return heuristic.model_copy(update=update)
