"""Analysis gateway backed by Google Gemini.

All risk judgments come from the model. This module only builds the prompt,
asks for JSON matching a fixed response schema and validates what comes
back. Any failure surfaces as a GatewayError subclass; there are no retries.
"""

import json
import logging
from typing import List, Optional

from google import genai
from google.genai import types
from pydantic import ValidationError

from config import settings
from schemas import AudioVerdict, ChatReply, ChatTurn, WebsiteVerdict

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Analysis could not be obtained; nothing should be persisted."""


class GatewayUnavailable(GatewayError):
    """The model could not be reached (no key, network error, timeout)."""


class GatewayMalformed(GatewayError):
    """The model answered, but not with a schema-valid verdict."""


WEBSITE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "status": {"type": "STRING", "enum": ["Safe", "Suspicious", "Fake"]},
        "riskScore": {"type": "NUMBER", "description": "Risk score from 0 to 100"},
        "reasons": {"type": "ARRAY", "items": {"type": "STRING"}},
        "details": {"type": "STRING"},
    },
    "required": ["status", "riskScore", "reasons", "details"],
}

AUDIO_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "scamProbability": {"type": "NUMBER"},
        "isScam": {"type": "BOOLEAN"},
        "alerts": {"type": "ARRAY", "items": {"type": "STRING"}},
        "explanation": {"type": "STRING"},
    },
    "required": ["scamProbability", "isScam", "alerts", "explanation"],
}

SUPPORT_INSTRUCTION = """You are CyberGuard Support, an empathetic and calm AI assistant for cybercrime victims.
Your goal is to reduce panic, provide step-by-step practical advice, and encourage reporting to official channels.
You are NOT a lawyer or a therapist, but a supportive guidance assistant.
Keep a professional yet warm tone.
If the user is in immediate distress, guide them to the nearest police station or official helpline."""


def website_prompt(url: str) -> str:
    return f"""Analyze this website URL for potential phishing or scam indicators: {url}.
Consider URL structure, common phishing keywords, and typical malicious patterns."""


def transcript_prompt(transcript: str) -> str:
    return f"""Analyze this transcript of an audio call for scam indicators: "{transcript}".
Look for urgency, manipulation, requests for sensitive info, or known scam scripts (e.g., tech support, bank fraud, lottery)."""


class GeminiGateway:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 timeout_seconds: Optional[int] = None, client=None):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.timeout_seconds = timeout_seconds or settings.GEMINI_TIMEOUT_SECONDS
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise GatewayUnavailable("GEMINI_API_KEY is not configured")
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(timeout=self.timeout_seconds * 1000),
            )
        return self._client

    def _generate(self, contents, config: types.GenerateContentConfig) -> str:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model, contents=contents, config=config
            )
        except Exception as e:
            logger.error(f"Gemini call failed: {e}")
            raise GatewayUnavailable(str(e)) from e
        return response.text or ""

    def _generate_json(self, prompt: str, schema: dict) -> dict:
        text = self._generate(
            prompt,
            types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        try:
            payload = json.loads(text)
        except ValueError as e:
            logger.error(f"Unparseable Gemini response: {text[:200]!r}")
            raise GatewayMalformed("response is not valid JSON") from e
        if not isinstance(payload, dict):
            raise GatewayMalformed("response is not a JSON object")
        return payload

    def analyze_website(self, url: str) -> WebsiteVerdict:
        payload = self._generate_json(website_prompt(url), WEBSITE_SCHEMA)
        try:
            return WebsiteVerdict.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Website verdict failed validation: {e.errors()}")
            raise GatewayMalformed("website verdict does not match schema") from e

    def analyze_transcript(self, transcript: str) -> AudioVerdict:
        payload = self._generate_json(transcript_prompt(transcript), AUDIO_SCHEMA)
        try:
            return AudioVerdict.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Audio verdict failed validation: {e.errors()}")
            raise GatewayMalformed("audio verdict does not match schema") from e

    def chat(self, message: str, prior_turns: List[ChatTurn]) -> ChatReply:
        contents = [
            types.Content(
                role="model" if turn.role == "assistant" else "user",
                parts=[types.Part(text=turn.content)],
            )
            for turn in prior_turns
        ]
        contents.append(types.Content(role="user", parts=[types.Part(text=message)]))
        text = self._generate(
            contents,
            types.GenerateContentConfig(system_instruction=SUPPORT_INSTRUCTION),
        )
        return ChatReply(content=text)
