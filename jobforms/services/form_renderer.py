"""
Runtime side of application forms: reading stored field metadata,
resolving submitted answers and validating them.

Stored data is treated as untrusted in shape: field lists may be JSON
strings, labels may live under `question` or `name`, and answer keys may
be snake_case or camelCase. None of that raises; missing answers render
as NOT_ANSWERED.
"""
import json
import logging
import re
from dataclasses import dataclass
from datetime import date
from pathlib import PurePath
from typing import Any, Mapping, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from jobforms.schemas.form import OPTION_FIELD_TYPES, FieldType

logger = logging.getLogger(__name__)

NOT_ANSWERED = "—"

PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{0,15}$")

# Named patterns the builder writes into `validation.pattern`
NAMED_PATTERNS = {"email", "phone"}

_OPTION_TYPE_VALUES = {t.value for t in OPTION_FIELD_TYPES}

_email_adapter = TypeAdapter(EmailStr)


@dataclass(frozen=True)
class NormalizedField:
    id: str
    label: str
    type: str = FieldType.TEXT.value
    required: bool = False
    options: tuple[str, ...] = ()
    validation: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class RenderedAnswer:
    field_id: str
    label: str
    answer: str


# ============================================================
# FIELD METADATA
# ============================================================

def _decode(raw: Any, what: str) -> Any:
    if isinstance(raw, (str, bytes)):
        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Ignoring malformed {what} JSON")
            return None
    return raw


def _as_flag(raw: Any) -> bool:
    if isinstance(raw, str):
        return raw.strip().lower() == "true"
    return raw is True


def normalize_fields(raw: Any) -> list[NormalizedField]:
    """
    Normalize raw field definitions into NormalizedField entries.

    Accepts a JSON string, an already parsed list, or None. Entries that are
    not objects are skipped. Label falls back through label, question, name
    and finally "Question N" (1-based position).
    """
    data = _decode(raw, "form fields")
    if not isinstance(data, list):
        return []

    normalized = []
    for position, item in enumerate(data, start=1):
        if not isinstance(item, Mapping):
            continue
        field_id = item.get("id") or item.get("name") or f"question_{position}"
        label = item.get("label") or item.get("question") or item.get("name") or f"Question {position}"
        field_type = item.get("type") or FieldType.TEXT.value
        options = item.get("options") or []
        validation = item.get("validation")
        normalized.append(NormalizedField(
            id=str(field_id),
            label=str(label),
            type=str(field_type),
            required=_as_flag(item.get("required")),
            options=tuple(str(o) for o in options) if isinstance(options, list) else (),
            validation=validation if isinstance(validation, Mapping) else None,
        ))
    return normalized


# ============================================================
# ANSWER LOOKUP
# ============================================================

def to_snake_case(key: str) -> str:
    key = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key)
    return key.replace("-", "_").lower()


def to_camel_case(key: str) -> str:
    head, *rest = to_snake_case(key).split("_")
    return head + "".join(part.capitalize() for part in rest)


def candidate_keys(field_id: Any) -> list[str]:
    """The id itself, then its snake_case and camelCase spellings (deduplicated)."""
    key = str(field_id)
    keys = []
    for candidate in (key, to_snake_case(key), to_camel_case(key)):
        if candidate not in keys:
            keys.append(candidate)
    return keys


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    if isinstance(value, (list, tuple, dict)) and not value:
        return True
    return False


def lookup_answer(answers: Optional[Mapping[str, Any]], *keys: str) -> Any:
    """First non-blank value among `keys`, or None."""
    if not answers:
        return None
    for key in keys:
        if key in answers and not _is_blank(answers[key]):
            return answers[key]
    return None


def format_answer(value: Any) -> str:
    if _is_blank(value):
        return NOT_ANSWERED
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if not _is_blank(v)) or NOT_ANSWERED
    if isinstance(value, Mapping):
        # File uploads are stored as {filename, size, type}
        return str(value.get("filename") or value.get("name") or NOT_ANSWERED)
    return str(value)


def parse_application_data(raw: Any) -> dict[str, Any]:
    data = _decode(raw, "application data")
    return dict(data) if isinstance(data, Mapping) else {}


def _as_normalized(fields: Any) -> list[NormalizedField]:
    if isinstance(fields, list) and fields and all(isinstance(f, NormalizedField) for f in fields):
        return fields
    return normalize_fields(fields)


def render_answers(fields: Any, application_data: Any) -> list[RenderedAnswer]:
    """One RenderedAnswer per field, in field order."""
    answers = parse_application_data(application_data)
    rendered = []
    for field in _as_normalized(fields):
        value = lookup_answer(answers, *candidate_keys(field.id))
        rendered.append(RenderedAnswer(field_id=field.id, label=field.label, answer=format_answer(value)))
    return rendered


# ============================================================
# VALIDATION
# ============================================================

def _is_email(value: str) -> bool:
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def _is_phone(value: str) -> bool:
    return bool(PHONE_PATTERN.match(re.sub(r"[\s\-()]", "", value)))


def _length_limit(field: NormalizedField, rules: Mapping[str, Any], name: str) -> Optional[int]:
    raw = rules.get(name)
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid {name} on field {field.id}: {raw!r}")
        return None


def _check_text(field: NormalizedField, value: str) -> Optional[str]:
    rules = field.validation or {}

    min_length = _length_limit(field, rules, "minLength")
    if min_length and len(value) < min_length:
        return f"Minimum {min_length} characters required"
    max_length = _length_limit(field, rules, "maxLength")
    if max_length and len(value) > max_length:
        return f"Maximum {max_length} characters allowed"

    pattern = rules.get("pattern")
    if pattern is not None and not isinstance(pattern, str):
        logger.warning(f"Ignoring non-string pattern on field {field.id}: {pattern!r}")
        pattern = None
    if pattern == "email" and not _is_email(value):
        return "Invalid email format"
    if pattern == "phone" and not _is_phone(value):
        return "Invalid phone number"
    if pattern and pattern not in NAMED_PATTERNS:
        try:
            if not re.fullmatch(pattern, value):
                return f"{field.label} has an invalid format"
        except re.error:
            logger.warning(f"Ignoring invalid pattern on field {field.id}: {pattern!r}")
    return None


def _check_value(field: NormalizedField, value: Any) -> Optional[str]:
    field_type = field.type

    if field_type == FieldType.CHECKBOX.value:
        selected = value if isinstance(value, list) else [value]
        if field.options and any(str(v) not in field.options for v in selected):
            return f"Invalid selection for {field.label}"
        return None

    if field_type == FieldType.FILE.value:
        filename = value.get("filename") if isinstance(value, Mapping) else str(value)
        allowed = (field.validation or {}).get("fileTypes")
        if isinstance(allowed, str):
            allowed = [allowed]
        elif not isinstance(allowed, (list, tuple)):
            allowed = None
        if allowed and filename:
            allowed = [str(t) for t in allowed]
            suffix = PurePath(filename).suffix.lower()
            if suffix not in {t.lower() for t in allowed}:
                return f"Supported formats: {', '.join(allowed)}"
        return None

    if not isinstance(value, (str, int, float)):
        return f"{field.label} must be a single value"
    text = str(value).strip()

    if field_type == FieldType.EMAIL.value:
        if not _is_email(text):
            return "Invalid email format"
    elif field_type == FieldType.PHONE.value:
        if not _is_phone(text):
            return "Invalid phone number"
    elif field_type == FieldType.DATE.value:
        try:
            date.fromisoformat(text)
        except ValueError:
            return "Invalid date"
    elif field_type in _OPTION_TYPE_VALUES:
        if field.options and text not in field.options:
            return f"Invalid selection for {field.label}"

    return _check_text(field, text)


def validate_answers(fields: Any, answers: Optional[Mapping[str, Any]]) -> dict[str, str]:
    """
    Validate submitted answers against field definitions.

    `fields` may be raw definitions or NormalizedField entries. Returns
    {field_id: message} for every failing field; empty when valid.
    Unknown answer keys are ignored.
    """
    errors: dict[str, str] = {}
    for field in _as_normalized(fields):
        value = lookup_answer(answers, *candidate_keys(field.id))
        if value is None:
            if field.required:
                errors[field.id] = f"{field.label} is required"
            continue
        message = _check_value(field, value)
        if message:
            errors[field.id] = message
    return errors
