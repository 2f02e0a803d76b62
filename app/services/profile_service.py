"""Patient/doctor profile documents and profile images."""
from __future__ import annotations

import uuid
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, Optional

from google.api_core.exceptions import AlreadyExists
from PIL import Image, UnidentifiedImageError

from app.core.config import settings
from app.core.errors import ConflictError, NotFoundError, ServiceError
from app.services import availability as avail

COLLECTION_BY_ROLE = {
    "patient": "patients",
    "doctor": "doctors",
}

# Fields a patient may change through the profile form
PROFILE_FIELDS = (
    "name",
    "mobile",
    "age",
    "gender",
    "address",
    "blood_group",
    "emergency_contact",
)

PROFILE_RESPONSE_FIELDS = (
    "name",
    "email",
    *PROFILE_FIELDS[1:],
    "profile_img",
    "role",
)


class InvalidImageError(ServiceError):
    status_code = 400


def register(db, uid: str, role: str, data: Dict[str, Any]) -> Dict[str, Any]:
    """Create the role document for a freshly signed-up Firebase user."""
    ref = db.collection(COLLECTION_BY_ROLE[role]).document(uid)
    doc = {**data, "role": role}
    if role == "patient":
        doc["medical_history"] = []
    else:
        doc["availability"] = avail.normalize(doc.get("availability") or [])
        doc["patients"] = []

    # create() fails when the document already exists
    try:
        ref.create(doc)
    except AlreadyExists as e:
        raise ConflictError("Profile already exists") from e
    return {"id": uid, **doc}


def get_patient(db, uid: str) -> Dict[str, Any]:
    snap = db.collection("patients").document(uid).get()
    if not snap.exists:
        raise NotFoundError("Patient not found")
    return {"id": uid, **(snap.to_dict() or {})}


def save_profile_image(uid: str, data: bytes) -> str:
    """
    Validate that `data` is an image and store it under UPLOAD_DIR/profiles.
    Returns the stored path.
    """
    if len(data) > settings.MAX_PROFILE_IMAGE_BYTES:
        raise InvalidImageError("Profile image too large")

    try:
        img = Image.open(BytesIO(data))
        img.verify()
        fmt = (img.format or "").lower()
    except Image.DecompressionBombError as e:
        raise InvalidImageError("Profile image dimensions too large") from e
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise InvalidImageError("Profile image must be a valid image file") from e

    ext = "jpg" if fmt == "jpeg" else fmt
    folder = Path(settings.UPLOAD_DIR) / "profiles"
    folder.mkdir(parents=True, exist_ok=True)

    path = folder / f"{uid}_{uuid.uuid4().hex}.{ext}"
    path.write_bytes(data)
    return str(path)


def update_patient_profile(
    db,
    uid: str,
    changes: Dict[str, Any],
    image: Optional[bytes] = None,
) -> Dict[str, Any]:
    """
    Apply a profile form. Empty or missing values keep the stored value.
    """
    ref = db.collection("patients").document(uid)
    snap = ref.get()
    if not snap.exists:
        raise NotFoundError("Patient not found")

    patient = snap.to_dict() or {}
    update = {
        field: changes[field]
        for field in PROFILE_FIELDS
        if changes.get(field) not in (None, "")
    }

    if image:
        update["profile_img"] = save_profile_image(uid, image)

    if update:
        ref.update(update)
    patient.update(update)

    return {"id": uid, **{f: patient.get(f) for f in PROFILE_RESPONSE_FIELDS}}
