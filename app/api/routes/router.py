from fastapi import APIRouter

from app.api.routes.auth import router as auth_router
from app.api.routes.patients import router as patients_router
from app.api.routes.doctors import router as doctors_router
from app.api.routes.chatbot import router as chatbot_router
from app.api.routes.reports import router as reports_router

api_router = APIRouter()

api_router.include_router(auth_router)

# Patient routes
api_router.include_router(patients_router)

# Doctor routes
api_router.include_router(doctors_router)

# AI helpers
api_router.include_router(chatbot_router)
api_router.include_router(reports_router)
