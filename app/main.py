from fastapi import FastAPI

from app.api.errors import register_exception_handlers
from app.api.routes.router import api_router
from app.core.firebase import init_firebase
from app.services.chatbot_service import ChatbotService

app = FastAPI(title="Healthcare Appointments Backend")


@app.on_event("startup")
def startup():
    """Initialize third-party services at app startup."""
    # Initialize Firebase Admin (reads credentials path from settings)
    init_firebase()

    # Gemini client is configured lazily on the first chat message
    app.state.chatbot_service = ChatbotService()


@app.get("/")
async def root():
    return {"message": "Healthcare Appointments Backend is running"}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


register_exception_handlers(app)
app.include_router(api_router)
