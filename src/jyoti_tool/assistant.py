"""Client for the hosted Gemini model behind the "Jyoti" chat tab."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from typing import Any

from dotenv import load_dotenv
from google import genai
from google.genai import types

from jyoti_tool.model import ChatMessage

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = """
You are Jyoti, a highly professional and empathetic digital assistant for ANMs \
(Auxiliary Nurse Midwives) in Bihar, India. Your primary goal is to support \
healthcare workers with accurate, actionable information based on MoHFW guidelines.

Specific Guidance Areas:
1. Maternal Health & Danger Signs (HRP):
   - Help identify High-Risk Pregnancies. Mention danger signs clearly: vaginal \
bleeding, high blood pressure (preeclampsia symptoms like severe headache/blurred \
vision), swelling of face/hands, decreased fetal movement, and high fever.
   - Promote 'Pradhan Mantri Surakshit Matritva Abhiyan (PMSMA)' for HRP checkups \
on the 9th of every month.

2. Postpartum Care (PNC):
   - Focus on the first 48 hours after delivery.
   - Maternal Danger Signs: Excessive bleeding (PPH), foul-smelling vaginal \
discharge, severe abdominal pain, or fever.
   - Newborn Danger Signs: Difficulty breathing, poor sucking/feeding, \
convulsions, cold to touch (hypothermia), or yellow palms/soles (jaundice).

3. Immunization:
   - Provide precise information based on the National Immunization Schedule (NIS).
   - Assist in calculating due dates and explaining vaccine benefits to parents.

4. Communication Style:
   - Use 'Hinglish' (a mix of simple Hindi and English) as ANMs are bilingual.
   - Be encouraging, concise, and medical-focused.
   - Always prioritize referral. If a danger sign is mentioned, suggest immediate \
referral to a Medical Officer or the nearest First Referral Unit (FRU).

5. Bihar Initiatives:
   - Refer to Bihar-specific programs like 'Mukhya Mantri Kanya Utthan Yojana' \
and 'Janani Suraksha Yojana (JSY)' when relevant.
"""

FALLBACK_MESSAGE = (
    "I'm sorry, I encountered an error. Please try again later. "
    "(क्षमा करें, तकनीकी समस्या आ गई है)"
)

QUICK_PROMPTS: tuple[str, ...] = (
    "गर्भावस्था के खतरे?",
    "शिशु के टीके?",
    "LMP-EDD गणना?",
)

DEFAULT_MODEL = "gemini-2.0-flash"


@dataclass(frozen=True)
class AssistantConfig:
    """Connection settings for the assistant."""

    api_key: str = ""
    model: str = DEFAULT_MODEL
    temperature: float = 0.7
    timeout_seconds: float = 30.0

    @classmethod
    def from_env(cls, **overrides: Any) -> AssistantConfig:
        """Read the API key from ``GEMINI_API_KEY`` (or ``API_KEY``), .env included."""
        load_dotenv()
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""
        return cls(api_key=api_key, **overrides)


class AssistantService:
    """One prompt in, one reply (or the fallback message) out."""

    def __init__(self, config: AssistantConfig, client: Any | None = None) -> None:
        self._config = config
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(
                api_key=self._config.api_key,
                http_options=types.HttpOptions(
                    timeout=int(self._config.timeout_seconds * 1000)
                ),
            )
        return self._client

    def ask(self, prompt: str) -> str:
        """Send ``prompt`` with the fixed system instruction.

        Never raises: any failure is logged and the fallback text returned.
        """
        try:
            response = self._get_client().models.generate_content(
                model=self._config.model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    temperature=self._config.temperature,
                ),
            )
        except Exception:
            logger.exception("Gemini API error")
            return FALLBACK_MESSAGE
        text = getattr(response, "text", None)
        if not text:
            logger.warning("Gemini returned an empty reply")
            return FALLBACK_MESSAGE
        return str(text)


@dataclass
class ChatSession:
    """In-memory transcript for a single app session."""

    service: AssistantService
    history: list[ChatMessage] = field(default_factory=list)
    _busy: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def is_loading(self) -> bool:
        return self._busy.locked()

    def send(self, text: str) -> str | None:
        """Record ``text`` and the assistant reply.

        Returns the reply, or None when the input is blank or another request
        is still running.
        """
        message = (text or "").strip()
        if not message:
            return None
        if not self._busy.acquire(blocking=False):
            return None
        try:
            self.history.append(ChatMessage(role="user", text=message))
            reply = self.service.ask(message)
            self.history.append(ChatMessage(role="bot", text=reply))
            return reply
        finally:
            self._busy.release()
