from __future__ import annotations

from datetime import datetime, timezone

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Snake-case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class TenantRecord(ApiModel):
    id: int
    organization_id: int = Field(
        validation_alias=AliasChoices("org_id", "organization_id", "organizationId"),
        serialization_alias="organizationId",
    )


def naive_utc(value: datetime | None) -> datetime | None:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value
