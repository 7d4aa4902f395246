"""
User profile endpoints - requires Firebase ID token
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from recovery_companion.gate.rules import Session
from recovery_companion.models.schemas import (
    DoctorUpdate,
    LoginPayload,
    OnboardingPayload,
    ProfileCompleteUpdate,
    SurgeryUpdate,
)
from recovery_companion.routes.dependencies import get_profile_store
from recovery_companion.services.profile_store import ProfileNotFoundError, ProfileStore
from recovery_companion.utils.auth import get_current_user
from recovery_companion.utils.errors import internal_error
from recovery_companion.utils.validators import validate_surgery_date

router = APIRouter()


@router.post("/users/login")
async def login(
    payload: Optional[LoginPayload] = None,
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """Create the profile on first sign-in, record the login otherwise"""
    try:
        payload = payload or LoginPayload()
        result = await store.create_user_document(
            user.uid, user.email, payload.display_name, payload.photo_url
        )
        return {"status": "ok", **result}
    except Exception as e:
        return internal_error("login", e)


@router.get("/users/me")
async def get_my_profile(
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    try:
        profile = await store.fetch_profile(user.uid)
    except Exception as e:
        return internal_error("getMyProfile", e)

    if profile is None:
        raise HTTPException(status_code=404, detail="Profile not found")
    return {"status": "ok", "profile": profile}


@router.post("/users/onboarding")
async def complete_onboarding(
    payload: OnboardingPayload,
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    """Save onboarding answers and mark the profile complete"""
    surgery_date = validate_surgery_date(payload.surgery_date)
    doctor = payload.doctor_info
    try:
        await store.save_onboarding_data(user.uid, {
            "surgeryType": payload.surgery_type.strip(),
            "surgeryDate": surgery_date,
            "expectedRecoveryWeeks": payload.expected_recovery_weeks,
            "doctorInfo": {
                "name": doctor.name.strip(),
                "phone": doctor.phone.strip(),
                "clinic": doctor.clinic.strip(),
                "email": (doctor.email or "").strip(),
            },
            "insuranceProvider": (payload.insurance_provider or "").strip(),
        })
        return {"status": "ok", "profileComplete": True}
    except Exception as e:
        return internal_error("completeOnboarding", e)


@router.put("/users/me/surgery")
async def update_surgery(
    payload: SurgeryUpdate,
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    surgery_date = validate_surgery_date(payload.surgery_date)
    try:
        await store.update_surgery_info(
            user.uid, payload.surgery_type.strip(), surgery_date, payload.expected_recovery_weeks
        )
        return {"status": "ok"}
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except Exception as e:
        return internal_error("updateSurgery", e)


@router.put("/users/me/doctor")
async def update_doctor(
    payload: DoctorUpdate,
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    try:
        await store.update_doctor_info(
            user.uid, payload.name.strip(), payload.clinic.strip(), payload.phone.strip()
        )
        return {"status": "ok"}
    except ProfileNotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except Exception as e:
        return internal_error("updateDoctor", e)


@router.put("/users/me/profile-complete")
async def set_profile_complete(
    payload: ProfileCompleteUpdate,
    user: Session = Depends(get_current_user),
    store: ProfileStore = Depends(get_profile_store),
):
    try:
        await store.update_profile_complete(user.uid, payload.profile_complete)
        return {"status": "ok", "profileComplete": payload.profile_complete}
    except Exception as e:
        return internal_error("setProfileComplete", e)
