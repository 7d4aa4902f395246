"""
Pydantic models for request/response validation
"""
from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

Mood = Literal["happy", "neutral", "sad", "pain", "frustrated"]


class LoginPayload(BaseModel):
    """Profile defaults taken from the sign-in provider"""
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class DoctorInfo(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: str = Field(..., min_length=1, max_length=50)
    clinic: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = ""


class OnboardingPayload(BaseModel):
    """Answers collected by the onboarding flow"""
    surgery_type: str = Field(..., min_length=1, max_length=100)
    surgery_date: str  # ISO 8601 or MM/DD/YYYY
    expected_recovery_weeks: int = Field(12, ge=1, le=104)
    doctor_info: DoctorInfo
    insurance_provider: Optional[str] = ""


class SurgeryUpdate(BaseModel):
    surgery_type: str = Field(..., min_length=1, max_length=100)
    surgery_date: str
    expected_recovery_weeks: int = Field(..., ge=1, le=104)


class DoctorUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    clinic: str = Field("", max_length=200)
    phone: str = Field("", max_length=50)


class ProfileCompleteUpdate(BaseModel):
    profile_complete: bool


class PhotoRef(BaseModel):
    url: str
    filename: str
    path: Optional[str] = None
    uploadedAt: Optional[str] = None


class DailyEntryPayload(BaseModel):
    """Daily check-in"""
    pain_level: int = Field(..., ge=0, le=10)
    medications: str = ""
    exercises_completed: List[str] = Field(default_factory=list)
    sleep_quality: int = Field(..., ge=1, le=5)
    mood: Mood = "neutral"
    notes: str = ""
    photos: List[PhotoRef] = Field(default_factory=list)
    entry_date: Optional[date] = None


class ReminderTime(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)


class DailyReminderPayload(BaseModel):
    hour: int = Field(20, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)


class MedicationReminderPayload(ReminderTime):
    medication_name: str = Field(..., min_length=1, max_length=200)
