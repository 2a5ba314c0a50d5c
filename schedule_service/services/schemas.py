"""Request schemas for the event service."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictStr, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from ..utils.timestamps import ensure_utc, parse_rfc3339


class CreateEventRequest(BaseModel):
    """
    Body of a create request.

    Unknown keys are rejected, including ``id`` and ``created_at``: those
    are always assigned by the service.
    """
    model_config = ConfigDict(extra='forbid')

    title: StrictStr
    description: Optional[StrictStr] = None
    start_time: datetime
    end_time: datetime

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title must not be empty")
        return value

    @field_validator('start_time', 'end_time', mode='before')
    @classmethod
    def parse_timestamp(cls, value: Any, info) -> datetime:
        if not isinstance(value, str):
            raise ValueError(f"{info.field_name} must be RFC3339 timestamp")
        try:
            parsed = parse_rfc3339(value)
        except ValueError:
            raise ValueError(f"{info.field_name} must be RFC3339 timestamp")
        try:
            return ensure_utc(parsed)
        except OverflowError:
            raise ValueError(f"{info.field_name} is out of range once converted to UTC")

    @model_validator(mode='after')
    def start_before_end(self) -> 'CreateEventRequest':
        if self.start_time >= self.end_time:
            raise ValueError("start_time must be before end_time")
        return self


def describe_validation_error(error: PydanticValidationError) -> str:
    """Turn the first pydantic error into a short client-facing message."""
    first: Dict[str, Any] = error.errors()[0]
    field = '.'.join(str(part) for part in first.get('loc', ()))
    error_type = first.get('type')

    if error_type == 'extra_forbidden':
        return f"unknown field '{field}'"
    if error_type == 'missing':
        return f"{field} is required"
    if error_type == 'value_error':
        # Messages raised by our own validators are already specific
        return str(first['ctx']['error'])
    if field:
        return f"{field}: {first.get('msg')}"
    return str(first.get('msg'))
