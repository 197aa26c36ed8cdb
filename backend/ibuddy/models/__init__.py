# Importing the models registers their tables on Base.metadata
from ibuddy.models.asset import AssetRecord, AssetType
from ibuddy.models.mentee import MenteeItem, MenteeStatus
from ibuddy.models.user import PasswordRecord, Role, UserRecord

__all__ = [
    "AssetRecord",
    "AssetType",
    "MenteeItem",
    "MenteeStatus",
    "PasswordRecord",
    "Role",
    "UserRecord",
]
