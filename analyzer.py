"""Inference clients for dog media analysis.

Both analyzers share one system instruction and one response schema.
``GeminiAnalyzer`` calls the model directly with a locally configured key;
``ProxyAnalyzer`` posts the raw media to the proxy endpoint, which holds the
key server-side and runs ``GeminiAnalyzer.generate_text`` on our behalf.
Either way the caller gets the same validated ``AnalysisResult``.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

import httpx

from config import API_KEY_ENV, DEFAULT_MODEL, MODE_DIRECT, MODE_PROXY
from errors import (
    AUTH_FAILED,
    EMPTY_RESPONSE,
    MALFORMED_RESPONSE,
    MODEL_ERROR,
    MODEL_UNAVAILABLE,
    NETWORK_ERROR,
    PROXY_ERROR,
    AnalysisError,
)
from interfaces import Analyzer, ConfigStore
from models import AnalysisResult, MediaBlob

try:
    from google import genai
    from google.genai import types
except Exception:  # pragma: no cover
    genai = None  # type: ignore
    types = None  # type: ignore

logger = logging.getLogger(__name__)

ANALYZE_PATH = "/api/analyze"
TEMPERATURE = 0.7

SYSTEM_INSTRUCTION = """
You are an Expert Canine Behaviorist, Ethologist, and Bioacoustics Analyst.
Your task is to analyze the provided audio or image/video of a dog to decipher its emotional state and intent.
Translate "dog language" into human understanding.

Output strictly in JSON format.
The content of the text fields should be in Russian, but the keys must match the schema.
IMPORTANT: Enum values (like stressLevel) must remain in English as per the schema (Low, Medium, Critical).

Analysis Framework:
- Audio: Pitch (High=fear/play, Low=threat), Tone, Rhythm.
- Visual: Tail, Ears, Eyes, Mouth, Posture.

Prioritize safety. If signals conflict, assume a conservative safety interpretation.
"""

USER_PROMPT = "Analyze this dog's behavior and vocalizations."

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "observations": {
            "type": "OBJECT",
            "properties": {
                "sound": {"type": "STRING", "description": "Observations about bark, growl, rhythm, tone"},
                "body": {"type": "STRING", "description": "Observations about tail, ears, posture, eyes"},
            },
            "required": ["sound", "body"],
        },
        "emotionalSpectrum": {
            "type": "OBJECT",
            "properties": {
                "dominantEmotion": {"type": "STRING", "description": "e.g., Fear, Guarding, Play, Frustration"},
                "stressLevel": {"type": "STRING", "enum": ["Low", "Medium", "Critical"]},
            },
            "required": ["dominantEmotion", "stressLevel"],
        },
        "translation": {
            "type": "STRING",
            "description": "First-person translation of what the dog is saying. e.g. 'I am nervous, give me space'",
        },
        "recommendations": {
            "type": "OBJECT",
            "properties": {
                "do": {"type": "STRING", "description": "Specific advice on how to react"},
                "dont": {"type": "STRING", "description": "What NOT to do"},
            },
            "required": ["do", "dont"],
        },
    },
    "required": ["observations", "emotionalSpectrum", "translation", "recommendations"],
}


def parse_analysis(text: str | None) -> AnalysisResult:
    """Validate the model's JSON reply against the response schema."""
    if not text or not text.strip():
        raise AnalysisError(EMPTY_RESPONSE, "model returned no text")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AnalysisError(MALFORMED_RESPONSE, f"invalid JSON: {exc}") from exc
    try:
        return AnalysisResult.from_dict(payload)
    except ValueError as exc:
        raise AnalysisError(MALFORMED_RESPONSE, str(exc)) from exc


def _classify_exception(exc: Exception) -> str:
    """Map an SDK/network exception to an inference error code."""
    low = str(exc).lower()
    if "401" in low or "403" in low or "auth" in low or "api key" in low:
        return AUTH_FAILED
    if isinstance(exc, (ConnectionError, TimeoutError)):
        return NETWORK_ERROR
    if "timeout" in low or "network" in low or "connection" in low:
        return NETWORK_ERROR
    return MODEL_ERROR


class GeminiAnalyzer:
    def __init__(
        self,
        api_key: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = TEMPERATURE,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._temperature = temperature

    def analyze(self, blob: MediaBlob) -> AnalysisResult:
        return parse_analysis(self.generate_text(blob))

    def generate_text(self, blob: MediaBlob) -> str:
        """Send the media to the model and return its raw JSON text."""
        if genai is None or types is None:
            raise AnalysisError(MODEL_UNAVAILABLE, "google-genai is not installed")

        api_key = self._api_key or os.getenv(API_KEY_ENV, "")
        if not api_key:
            raise AnalysisError(AUTH_FAILED, "No API key configured")

        logger.info("Sending %d bytes of %s to %s", len(blob.data), blob.mime_type, self._model)
        try:
            client = genai.Client(api_key=api_key)
            response = client.models.generate_content(
                model=self._model,
                contents=[
                    types.Part.from_bytes(data=blob.data, mime_type=blob.mime_type),
                    USER_PROMPT,
                ],
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    response_mime_type="application/json",
                    response_schema=RESPONSE_SCHEMA,
                    temperature=self._temperature,
                ),
            )
        except Exception as exc:
            raise AnalysisError(_classify_exception(exc), str(exc)) from exc

        text = response.text
        if not text:
            raise AnalysisError(EMPTY_RESPONSE, "No response text from Gemini")
        return text


class ProxyAnalyzer:
    def __init__(
        self,
        base_url: str,
        request_timeout_s: float = 120.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=request_timeout_s)

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}{ANALYZE_PATH}"

    def analyze(self, blob: MediaBlob) -> AnalysisResult:
        logger.info("Posting %d bytes of %s to %s", len(blob.data), blob.mime_type, self.endpoint)
        try:
            response = self._client.post(
                self.endpoint,
                content=blob.data,
                headers={"Content-Type": blob.mime_type, "X-Mime-Type": blob.mime_type},
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise AnalysisError(NETWORK_ERROR, str(exc)) from exc

        if not response.is_success:
            try:
                detail = response.json().get("error", response.text)
            except (ValueError, AttributeError):
                detail = response.text
            raise AnalysisError(PROXY_ERROR, f"proxy returned {response.status_code}: {detail}")
        return parse_analysis(response.text)

    def close(self) -> None:
        self._client.close()


def create_analyzer(config_store: ConfigStore) -> Analyzer:
    """Pick the inference implementation for the configured mode."""
    mode = config_store.get_mode()
    if mode == MODE_DIRECT:
        return GeminiAnalyzer(api_key=config_store.get_api_key(), model=config_store.get_model())
    if mode == MODE_PROXY:
        return ProxyAnalyzer(
            base_url=config_store.get_proxy_url(),
            request_timeout_s=config_store.get_request_timeout_s(),
        )
    raise ValueError(f"unknown analyzer mode: {mode!r}")
