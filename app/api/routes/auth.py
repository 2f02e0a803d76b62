"""Authentication-related routes.

Frontend performs authentication with Firebase; backend exposes the
caller's identity and creates their role document on first sign-in.
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError

from app.api.deps import get_current_user, user_roles
from app.core.firebase import get_db
from app.models.doctor import DoctorCreate
from app.models.patient import PatientCreate
from app.services import profile_service

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(user=Depends(get_current_user)):
    return {"uid": user.get("uid"), "email": user.get("email"), "role": user.get("role")}


@router.post("/register", status_code=201)
async def register(
    data: dict = Body(...),
    user=Depends(get_current_user),
    db=Depends(get_db),
):
    """Create the patients/{uid} or doctors/{uid} document for the caller."""
    roles = [r for r in user_roles(user) if r in profile_service.COLLECTION_BY_ROLE]
    if not roles:
        raise HTTPException(status_code=403, detail="No supported role on this account")
    role = roles[0]

    model = PatientCreate if role == "patient" else DoctorCreate
    try:
        payload = model(**{"email": user.get("email"), **data}).model_dump(exclude_none=True)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=jsonable_encoder(e.errors(include_url=False, include_context=False))) from e

    return profile_service.register(db, user["uid"], role, payload)
