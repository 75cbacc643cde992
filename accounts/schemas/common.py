from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_url_adapter = TypeAdapter(AnyUrl)


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python; accepts either on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def normalize_email(v: Any) -> Any:
    if isinstance(v, str):
        return v.lower().strip()
    return v


def trimmed_url(v: Any) -> Optional[str]:
    # validated as a URL but stored as typed (trimmed), not re-serialized
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError("URL must be a string")
    s = v.strip()
    try:
        _url_adapter.validate_python(s)
    except ValidationError:
        raise ValueError("Invalid URL") from None
    return s


def as_utc(v: Any) -> Any:
    # sqlite hands timestamps back without tzinfo; they were written as UTC
    if isinstance(v, datetime) and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


def iso_date(v: Any) -> Any:
    if v is None or isinstance(v, date):
        return v
    if not isinstance(v, str) or not _DATE_RE.match(v):
        raise ValueError("Invalid date (YYYY-MM-DD)")
    return date.fromisoformat(v)
