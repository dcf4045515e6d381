"""Shared Pydantic base models and serializers."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict


def utc_now() -> datetime:
    """Timezone-aware current time, used for every stored timestamp."""
    return datetime.now(timezone.utc)


def datetime_to_utc_z(value: datetime) -> str:
    """
    Serialize datetime to RFC3339 with trailing 'Z'.

    Policy:
    - Naive datetime is treated as UTC.
    - Aware datetime is converted to UTC.
    """
    if value.tzinfo is None:
        utc_value = value.replace(tzinfo=timezone.utc)
    else:
        utc_value = value.astimezone(timezone.utc)

    iso_value = utc_value.isoformat()
    if iso_value.endswith("+00:00"):
        return iso_value[:-6] + "Z"
    return iso_value


def parse_utc_datetime(value: Optional[str]) -> Optional[datetime]:
    """Inverse of datetime_to_utc_z; also accepts '+00:00' offsets."""
    if value is None:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class UTCZBaseModel(BaseModel):
    """Base model that serializes datetime fields as UTC with 'Z' suffix."""

    model_config = ConfigDict(
        json_encoders={datetime: datetime_to_utc_z},
    )
