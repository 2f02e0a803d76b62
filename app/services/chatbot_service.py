# app/services/chatbot_service.py
from __future__ import annotations

import os

import google.generativeai as genai

from app.core.config import settings
from app.services.logger import log_debug

NO_RESPONSE = "No response generated by the API."

TRIAGE_PROMPT = """Based on the following patient symptoms and history, suggest probable medical conditions and further steps. Ensure the response is concise, accurate, and includes layman-friendly language:

Patient Symptoms: {message}

Response requirements:
- List 2-3 possible conditions ranked by likelihood.
- Include a one-line explanation for each condition.
- Suggest 1-2 next steps for the patient (e.g., visit a specific specialist, take specific tests).

Format the response as:
1. Condition 1: Explanation
2. Condition 2: Explanation
3. Condition 3: Explanation

Next Steps:
- Step 1
- Step 2

Patient Message: '{message}'"""


def build_prompt(message: str) -> str:
    return TRIAGE_PROMPT.format(message=message)


def extract_text(response) -> str:
    """
    First text part of the first candidate, or the fallback message.

    `response.text` raises when the model returned no parts (e.g. blocked
    by safety filters), so walk the candidates instead.
    """
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return NO_RESPONSE

    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    if not parts:
        return NO_RESPONSE

    text = getattr(parts[0], "text", "") or ""
    return text or NO_RESPONSE


class ChatbotService:
    """Symptom triage over Gemini. Stateless: each message is one prompt."""

    def __init__(self, model_name: str | None = None):
        self.model_name = model_name or settings.GEMINI_MODEL
        self._model = None

    def _get_model(self):
        if self._model is None:
            api_key = settings.GEMINI_API_KEY or os.getenv("GOOGLE_API_KEY")
            if not api_key:
                raise RuntimeError(
                    "Gemini API key not found. Set GEMINI_API_KEY (or GOOGLE_API_KEY) in .env "
                    "or as an environment variable."
                )
            genai.configure(api_key=api_key)
            self._model = genai.GenerativeModel(self.model_name)
        return self._model

    def reply(self, message: str) -> str:
        response = self._get_model().generate_content(build_prompt(message))

        try:
            raw = response.to_dict()
        except Exception:
            raw = repr(response)
        log_debug("gemini_response", {"model": self.model_name, "response": raw})

        return extract_text(response)
