"""Tree data import: JSON snapshots of persons and relationships to TreeData."""

import json
from pathlib import Path
import re

from models import PARENT, SIBLING, SPOUSE, Person, Relationship, TreeData

# Month name mappings (abbreviations and full names share a three-letter prefix)
MONTHS = {
    "JAN": 1,
    "FEB": 2,
    "MAR": 3,
    "APR": 4,
    "MAY": 5,
    "JUN": 6,
    "JUL": 7,
    "AUG": 8,
    "SEP": 9,
    "OCT": 10,
    "NOV": 11,
    "DEC": 12,
}

RELATIONSHIP_TYPES = (PARENT, SPOUSE, SIBLING)


def parse_date_string(date_str: str | None) -> str | None:
    """
    Parse a loosely written date into ISO format (YYYY-MM-DD), or None.

    Handles formats like:
    - "1954-11-25" (month or day 00 become 01)
    - "25 NOV 1954", "25 November 1954"
    - "NOV 1954", "November, 1954"
    - "1954"
    - qualifiers such as "ABT 1905", "about 1905", "BEF 1900", "circa 1855"
    """
    if not date_str:
        return None

    s = date_str.strip().strip("()").rstrip("?").upper()
    s = re.sub(
        r"^(ABOUT|ABT|BEFORE|BEF|AFTER|AFT|ESTIMATED|EST|CALCULATED|CAL|CIRCA|CA|AROUND)\.?:?\s+",
        "",
        s,
    ).strip()

    match = re.match(r"^(\d{4})-(\d{2})-(\d{2})$", s)
    if match:
        year, month, day = (int(g) for g in match.groups())
        if month <= 12 and day <= 31:
            return f"{year:04d}-{max(month, 1):02d}-{max(day, 1):02d}"
        return None

    match = re.match(r"^(?:(\d{1,2})\s+)?([A-Z]{3})[A-Z]*\.?,?\s*(\d{4})$", s)
    if match and match.group(2) in MONTHS:
        day = int(match.group(1)) if match.group(1) else 1
        return f"{int(match.group(3)):04d}-{MONTHS[match.group(2)]:02d}-{day:02d}"

    match = re.match(r"^(\d{4})$", s)
    if match:
        return f"{int(match.group(1)):04d}-01-01"

    return None


def person_from_record(record: dict) -> Person:
    """Build a Person from one JSON record; dates are normalized to ISO where possible."""
    death_date = record.get("death_date")
    return Person(
        id=str(record["id"]),
        given_name=record.get("given_name") or "Unknown",
        gender=record.get("gender"),
        family_name=record.get("family_name"),
        patronymic_chain=record.get("patronymic_chain"),
        full_name_ar=record.get("full_name_ar"),
        full_name_en=record.get("full_name_en"),
        birth_date=parse_date_string(record.get("birth_date")) or record.get("birth_date"),
        birth_place=record.get("birth_place"),
        death_date=parse_date_string(death_date) or death_date,
        death_place=record.get("death_place"),
        is_living=record.get("is_living", death_date is None),
    )


def relationship_from_record(record: dict, index: int) -> Relationship:
    rel_type = record.get("relationship_type") or record.get("type")
    if rel_type not in RELATIONSHIP_TYPES:
        raise ValueError(f"Relationship #{index} has unknown type: {rel_type!r}")
    return Relationship(
        id=str(record.get("id") or f"rel-{index}"),
        person1_id=str(record["person1_id"]),
        person2_id=str(record["person2_id"]),
        relationship_type=rel_type,
        marriage_date=record.get("marriage_date"),
        marriage_place=record.get("marriage_place"),
        divorce_date=record.get("divorce_date"),
        divorce_place=record.get("divorce_place"),
    )


def tree_data_from_dict(data: dict, root_person_id: str | None = None) -> TreeData:
    """
    Normalize a {"persons": [...], "relationships": [...], "root_person_id": ...} mapping.

    For parent relationships person1 is the parent of person2.
    """
    persons = tuple(person_from_record(r) for r in data.get("persons") or [])
    relationships = tuple(
        relationship_from_record(r, i) for i, r in enumerate(data.get("relationships") or [])
    )
    return TreeData(
        persons=persons,
        relationships=relationships,
        root_person_id=root_person_id or data.get("root_person_id"),
    )


def read_tree_data(filepath: Path, root_person_id: str | None = None) -> TreeData:
    """Read a JSON tree snapshot from disk."""
    data = json.loads(Path(filepath).read_text(encoding="utf-8"))
    return tree_data_from_dict(data, root_person_id)
