from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from healthmate.models.user import DEFAULT_NOTIFICATION_PREFERENCES

LanguageCode = Literal["en", "hi", "es", "fr", "ta", "te", "kn", "bn", "mr", "gu", "ml", "pa"]


class UserCreate(BaseModel):
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(min_length=8, max_length=128)
    full_name: Optional[str] = None
    preferred_language: LanguageCode = "en"


class NotificationPreferences(BaseModel):
    health_tips: bool = True
    disease_alerts: bool = True
    appointment_reminders: bool = True


class NotificationPreferencesUpdate(BaseModel):
    health_tips: Optional[bool] = None
    disease_alerts: Optional[bool] = None
    appointment_reminders: Optional[bool] = None


class UserUpdate(BaseModel):
    """
    Partial profile update; only fields present in the request change.
    """

    full_name: Optional[str] = Field(default=None, max_length=200)
    phone_number: Optional[str] = Field(default=None, max_length=32)
    location: Optional[str] = Field(default=None, max_length=200)
    # checked by the profile service so the user gets a friendly message
    preferred_language: Optional[str] = Field(default=None, max_length=8)
    notification_preferences: Optional[NotificationPreferencesUpdate] = None


class UserOut(BaseModel):
    id: int
    email: str
    full_name: Optional[str] = None
    phone_number: Optional[str] = None
    location: Optional[str] = None
    preferred_language: str
    notification_preferences: NotificationPreferences = NotificationPreferences()
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("notification_preferences", mode="before")
    @classmethod
    def default_preferences(cls, value):
        if value is None:
            return dict(DEFAULT_NOTIFICATION_PREFERENCES)
        return value


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
