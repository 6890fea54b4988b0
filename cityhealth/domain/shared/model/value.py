from datetime import UTC, datetime
from typing import NewType

from pydantic import BaseModel, ConfigDict

ProviderId = NewType("ProviderId", str)


def utc_now() -> datetime:
    return datetime.now(UTC)


class ValueObject(BaseModel):
    model_config = ConfigDict(frozen=True)
