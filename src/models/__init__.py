"""Database model type definitions."""

from src.models.profile import EmailPreferences, PrivacySettings, Profile, ProfileUpdate
from src.models.spot import Spot, SpotInsert

__all__ = [
    "Profile",
    "ProfileUpdate",
    "PrivacySettings",
    "EmailPreferences",
    "Spot",
    "SpotInsert",
]
