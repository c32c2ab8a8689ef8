"""
Careers page section management.

Sections are stored as a JSON list on the company row. Every helper here
takes the current list and returns a new one; ``order`` is always rewritten
to match list position so the stored value stays contiguous (0..n-1).
"""
import copy
import logging
from typing import Any, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)


SECTION_TYPE_LABELS: Dict[str, str] = {
    "hero": "Hero",
    "about": "About Us",
    "culture": "Culture & Values",
    "values": "Our Values",
    "perks": "Perks & Benefits",
    "custom": "Custom Section",
}


class SectionNotFoundError(Exception):
    """Raised when a section id is not present on the company"""
    pass


def default_sections() -> List[Dict[str, Any]]:
    """Sections every new company page starts with."""
    return [
        {
            "id": "1",
            "type": "hero",
            "visible": True,
            "order": 0,
            "data": {
                "title": "Join Our Team",
                "content": "Build the future with us. We are looking for passionate people to join our growing team.",
            },
        },
        {
            "id": "2",
            "type": "about",
            "visible": True,
            "order": 1,
            "data": {
                "title": "About Us",
                "content": "We are a forward-thinking company dedicated to innovation and excellence.",
            },
        },
        {
            "id": "3",
            "type": "culture",
            "visible": True,
            "order": 2,
            "data": {
                "title": "Our Culture",
                "content": "We believe in collaboration, creativity, and continuous learning.",
            },
        },
        {
            "id": "4",
            "type": "perks",
            "visible": True,
            "order": 3,
            "data": {
                "title": "Perks & Benefits",
                "content": "Health Insurance\nRemote Work\nLearning Budget\nTeam Events\nCompetitive Salary",
            },
        },
    ]


def renumber(sections: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Copy sections with order set to list position."""
    result = []
    for index, section in enumerate(sections):
        updated = copy.deepcopy(section)
        updated["order"] = index
        result.append(updated)
    return result


def sorted_sections(sections: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    return sorted(sections or [], key=lambda s: s.get("order", 0))


def visible_sections(sections: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Sections shown on the public page, in display order."""
    return [s for s in sorted_sections(sections) if s.get("visible", True)]


def _index_of(sections: List[Dict[str, Any]], section_id: str) -> int:
    for index, section in enumerate(sections):
        if section.get("id") == section_id:
            return index
    raise SectionNotFoundError(f"Section {section_id} not found")


def add_section(
    sections: List[Dict[str, Any]],
    section_type: str,
    data: Optional[Dict[str, Any]] = None,
) -> List[Dict[str, Any]]:
    """Append a new visible section of the given type at the end."""
    if section_type not in SECTION_TYPE_LABELS:
        raise ValueError(f"Unknown section type: {section_type}")
    
    section_data = {"title": SECTION_TYPE_LABELS[section_type], "content": ""}
    if data:
        section_data.update(data)
    
    new_section = {
        "id": uuid4().hex,
        "type": section_type,
        "visible": True,
        "order": len(sections),
        "data": section_data,
    }
    return renumber(sorted_sections(sections) + [new_section])


def update_section(
    sections: List[Dict[str, Any]],
    section_id: str,
    data: Optional[Dict[str, Any]] = None,
    visible: Optional[bool] = None,
) -> List[Dict[str, Any]]:
    """Merge new data into one section and/or set its visibility."""
    ordered = sorted_sections(sections)
    index = _index_of(ordered, section_id)
    
    updated = copy.deepcopy(ordered[index])
    if data is not None:
        updated["data"] = {**updated.get("data", {}), **data}
    if visible is not None:
        updated["visible"] = visible
    
    ordered = ordered[:index] + [updated] + ordered[index + 1:]
    return renumber(ordered)


def toggle_visibility(sections: List[Dict[str, Any]], section_id: str) -> List[Dict[str, Any]]:
    ordered = sorted_sections(sections)
    current = ordered[_index_of(ordered, section_id)]
    return update_section(ordered, section_id, visible=not current.get("visible", True))


def delete_section(sections: List[Dict[str, Any]], section_id: str) -> List[Dict[str, Any]]:
    ordered = sorted_sections(sections)
    index = _index_of(ordered, section_id)
    return renumber(ordered[:index] + ordered[index + 1:])


def move_section(
    sections: List[Dict[str, Any]],
    section_id: str,
    new_index: int,
) -> List[Dict[str, Any]]:
    """
    Move one section to new_index, shifting the others.

    new_index is clamped to the list bounds.
    """
    ordered = sorted_sections(sections)
    old_index = _index_of(ordered, section_id)
    new_index = max(0, min(new_index, len(ordered) - 1))
    
    moving = ordered.pop(old_index)
    ordered.insert(new_index, moving)
    logger.debug(f"Moved section {section_id} from {old_index} to {new_index}")
    return renumber(ordered)
