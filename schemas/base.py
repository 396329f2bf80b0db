# schemas/base.py
"""
Shared Pydantic configuration.

The API speaks camelCase JSON (rentAmount, checkoutRequestId) while the
Python side uses snake_case. Every schema inherits CamelModel so both
spellings are accepted on input and camelCase is produced on output.
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, AfterValidator, BeforeValidator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
     model_config = ConfigDict(
          alias_generator=to_camel,
          populate_by_name=True,
          from_attributes=True,
     )


class MessageResponse(CamelModel):
     """Plain acknowledgement body, e.g. {"message": "Tenant removed"}."""
     message: str


def to_naive_local(value: datetime) -> datetime:
     """Timestamps are stored naive in server-local time; convert aware inputs."""
     if value.tzinfo is not None:
          return value.astimezone().replace(tzinfo=None)
     return value


def blank_to_none(value):
     if isinstance(value, str) and value.strip() == "":
          return None
     return value


# Datetime input stored as naive local time
LocalDatetime = Annotated[datetime, AfterValidator(to_naive_local)]

# Optional foreign key where the frontend sends "" for "none"
OptionalId = Annotated[Optional[int], BeforeValidator(blank_to_none)]
