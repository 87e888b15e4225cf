from datetime import date, datetime
import re
from pydantic import BaseModel, model_validator
from typing import Any, Union, get_args, get_origin

INVISIBLE_CHARS_PATTERN = re.compile(
    r'[\u200e\u200f\u202a-\u202e\u2066-\u2069\ufeff]')


def deep_clean(value: Any):
    """Recursively convert blank strings to None and strip invisible chars."""

    if isinstance(value, dict):
        return {k: deep_clean(v) for k, v in value.items()}

    if isinstance(value, list):
        return [deep_clean(v) for v in value]

    if isinstance(value, str):
        cleaned = INVISIBLE_CHARS_PATTERN.sub("", value).strip()
        return None if cleaned == "" else cleaned

    return value


def _is_date_annotation(annotation) -> bool:
    if annotation in (date, datetime):
        return True
    return get_origin(annotation) is Union and any(
        a in (date, datetime) for a in get_args(annotation)
    )


class EmptyStringModel(BaseModel):
    """Request model that treats blank form/query values as missing.

    Query strings and pasted form values from the front office arrive as
    "" for untouched inputs; those must not reach Decimal or date fields.
    """
    model_config = {
        "populate_by_name": True,
        "from_attributes": True,
    }

    @model_validator(mode="before")
    @classmethod
    def clean_input(cls, values):
        if not isinstance(values, dict):
            return values

        values = deep_clean(values)

        # Optional date fields: unparseable strings become None
        for field_name, field in cls.model_fields.items():
            raw_value = values.get(field_name)
            if not _is_date_annotation(field.annotation) or not isinstance(raw_value, str):
                continue
            try:
                values[field_name] = date.fromisoformat(raw_value[:10])
            except ValueError:
                if field.is_required():
                    # let pydantic report the bad value
                    continue
                values[field_name] = None

        return values
