# app/api/routes/chatbot.py

import traceback

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.api.deps import get_current_user
from app.models.schemas import ChatRequest, ChatResponse
from app.services.logger import log_warning

router = APIRouter(prefix="/chatbot", tags=["chatbot"])

CHAT_ERROR = "Unable to process your request. Please try again later."


@router.post("/chat", response_model=ChatResponse)
def chat(req: ChatRequest, request: Request, user=Depends(get_current_user)):
    """Symptom triage: one message in, Gemini's suggestions out."""
    svc = request.app.state.chatbot_service

    try:
        reply = svc.reply(req.message)
    except Exception as e:
        log_warning("Error with Gemini API", e)
        traceback.print_exc()
        return JSONResponse(status_code=500, content={"error": CHAT_ERROR})

    return ChatResponse(response=reply)
