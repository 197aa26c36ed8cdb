"""Asset schemas."""

from datetime import datetime

from pydantic import BaseModel, field_validator

from ibuddy.models.asset import AssetType
from ibuddy.schemas.common import require_text


class Asset(BaseModel):
    id: str
    name: str
    type: AssetType
    owner_id: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AssetCreate(BaseModel):
    name: str
    type: AssetType
    owner_id: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return require_text(v, "Name")
