"""TestClient wired to a fake Firestore and a fixed signed-in user."""
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app.api.deps import get_current_user
from app.api.errors import register_exception_handlers
from app.api.routes.router import api_router
from app.core.firebase import get_db


def make_client(db, user):
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(api_router)

    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_user] = lambda: user

    # Unhandled errors must come back as 500 responses, not re-raise
    return TestClient(app, raise_server_exceptions=False)


PATIENT = {"uid": "p1", "email": "ravi@healthmail.in", "role": "patient"}
DOCTOR = {"uid": "dr1", "email": "mehta@healthmail.in", "role": "doctor"}
