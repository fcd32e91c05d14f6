"""
Sanitizes raw save payloads into certificate records.

Callers may send the certificate fields flat at the top level or nested
inside `certification`; both shapes resolve to the same record.
"""

import math
from typing import Any, Dict, List, Optional
from uuid import uuid4

DEFAULT_STUDENT_CATEGORY = "غير محدد"  # "unspecified"
DEFAULT_LANG = "ar"

# Optional text fields: name -> fallback
TEXT_FIELDS = {
    "studentCategory": DEFAULT_STUDENT_CATEGORY,
    "studentCenter": "",
    "sigName": "",
    "lang": DEFAULT_LANG,
}

# Optional numeric fields: name -> fallback
NUMBER_FIELDS = {
    "attendance": 0,
    "absence": 0,
    "average": None,
}

# Free-form certification details, kept only when supplied
OPTIONAL_TEXT_FIELDS = (
    "certificationNumber",
    "certificationType",
    "completionDate",
    "certificateLink",
    "grade",
    "hours",
)


def to_text(value: Any, fallback: Any = "") -> Any:
    """Trimmed string for text input, fallback for anything else."""
    return value.strip() if isinstance(value, str) else fallback


def to_number(value: Any, default: Any = 0) -> Any:
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default

    if math.isnan(number) or math.isinf(number):
        return default
    return int(number) if number.is_integer() else number


def normalize_grades(grades: Any) -> List[Dict[str, Any]]:
    if not isinstance(grades, list):
        return []

    normalized = []
    for entry in grades:
        if not isinstance(entry, dict):
            entry = {}
        normalized.append({
            "subject": to_text(entry.get("subject"), ""),
            "first": to_number(entry.get("first")),
            "second": to_number(entry.get("second")),
        })
    return normalized


def resolve_id(value: Any) -> str:
    if isinstance(value, bool):
        value = None
    if isinstance(value, int):
        return str(value)
    return to_text(value) or str(uuid4())


def _first_text(*candidates: Any) -> str:
    for candidate in candidates:
        text = to_text(candidate)
        if text:
            return text
    return ""


def _first_present(*candidates: Any) -> Optional[Any]:
    for candidate in candidates:
        if candidate is None:
            continue
        if isinstance(candidate, str) and not candidate.strip():
            continue
        return candidate
    return None


def build_certificate_record(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the stored form of a certificate from a raw save payload.

    Every optional field resolves in the same order: the top-level value, then
    the same key inside the certification payload, then the default. The
    certification payload itself is kept untouched under `certification`.

    Required fields are not checked here; see `missing_required_fields`.
    """
    certification = payload.get("certification")
    if not isinstance(certification, dict):
        certification = {}

    record: Dict[str, Any] = {
        "id": resolve_id(payload.get("id")),
        "registrationNumber": to_text(payload.get("registrationNumber")),
        "studentName": to_text(payload.get("studentName")),
    }

    for field, fallback in TEXT_FIELDS.items():
        record[field] = _first_text(payload.get(field), certification.get(field)) or fallback

    for field, fallback in NUMBER_FIELDS.items():
        value = _first_present(payload.get(field), certification.get(field))
        record[field] = to_number(value, fallback)

    grades = payload.get("grades")
    if grades is None:
        grades = certification.get("grades")
    record["grades"] = normalize_grades(grades)

    for field in OPTIONAL_TEXT_FIELDS:
        text = _first_text(payload.get(field), certification.get(field))
        if text:
            record[field] = text

    record["certification"] = certification
    record["image"] = to_text(payload.get("image")) or None
    return record


def missing_required_fields(payload: Dict[str, Any]) -> List[str]:
    return [
        field for field in ("registrationNumber", "studentName")
        if not to_text(payload.get(field))
    ]
