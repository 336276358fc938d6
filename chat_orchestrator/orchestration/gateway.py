"""
Completion gateway for the Gemini ``generateContent`` REST API.

Owns the translation between the wire format and the closed set of
``CompletionOutcome`` values the orchestration loop branches on. The model
turn behind a tool call is returned as a ``RawTurn`` wrapping the exact
``parts`` list from the response, so any opaque metadata the service
attaches (``thoughtSignature`` and the like) survives the round trip.
"""

import logging
from typing import Optional, Sequence

import requests

from ..errors import CompletionServiceError, ToolExecutionError
from ..models import (
    CompletionOutcome,
    FinalAnswer,
    GeminiConfig,
    Malformed,
    RawTurn,
    ServiceError,
    ToolCallRequested,
    TranscriptEntry,
    Turn,
)
from ..tools.registry import CapabilityDescriptor

logger = logging.getLogger(__name__)


def build_request_body(
    turns: Sequence[TranscriptEntry],
    descriptors: Sequence[CapabilityDescriptor] = (),
) -> dict:
    """Build a ``generateContent`` request body."""
    body: dict = {"contents": [turn.to_wire() for turn in turns]}
    if descriptors:
        body["tools"] = [
            {"functionDeclarations": [d.to_declaration() for d in descriptors]}
        ]
    return body


def parse_response(data: dict) -> CompletionOutcome:
    """
    Classify a ``generateContent`` response.

    Only the first candidate is considered. When it carries several
    ``functionCall`` parts the first one listed wins. Thought-summary text
    parts are never taken as the answer.
    """
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates:
        return Malformed("response has no candidates")
    if not isinstance(candidates[0], dict):
        return Malformed("candidate is not an object")

    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        return Malformed("candidate content is not an object")
    parts = content.get("parts") or []
    if not isinstance(parts, list) or not parts:
        return Malformed("candidate has no content parts")

    calls = [p for p in parts if isinstance(p, dict) and p.get("functionCall")]
    if calls:
        call = calls[0]["functionCall"]
        if not isinstance(call, dict):
            return Malformed("function call part is not an object")
        if len(calls) > 1:
            logger.info(
                "Response requested %d tool calls; honoring the first (%s)",
                len(calls),
                call.get("name"),
            )
        name = call.get("name")
        arguments = call.get("args") or {}
        if not name or not isinstance(arguments, dict):
            return Malformed("function call part without a usable name or args")
        return ToolCallRequested(name=name, arguments=arguments, raw_turn=RawTurn(parts=parts))

    for part in parts:
        if isinstance(part, dict) and part.get("text") and not part.get("thought"):
            return FinalAnswer(part["text"])

    return Malformed("candidate has neither text nor a function call")


class CompletionGateway:
    """Synchronous client for one Gemini model."""

    def __init__(self, gemini_config: GeminiConfig):
        self.config = gemini_config

    @property
    def model(self) -> str:
        return self.config.model

    def _post(self, body: dict) -> dict:
        """
        POST ``body`` and return the decoded JSON.

        Raises:
            CompletionServiceError: missing key, transport failure,
                non-success status, or an undecodable body.
        """
        if not self.config.api_key:
            raise CompletionServiceError("GEMINI_API_KEY is not configured")

        try:
            response = requests.post(
                self.config.generate_url,
                json=body,
                headers={"x-goog-api-key": self.config.api_key},
                timeout=self.config.timeout,
            )
        except requests.exceptions.RequestException as e:
            raise CompletionServiceError(f"request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.ok:
            message = None
            if isinstance(data, dict):
                message = (data.get("error") or {}).get("message")
            raise CompletionServiceError(
                message or f"HTTP {response.status_code}: {response.text[:500]}"
            )
        if not isinstance(data, dict):
            raise CompletionServiceError("response body is not a JSON object")
        return data

    def complete(
        self,
        turns: Sequence[TranscriptEntry],
        descriptors: Sequence[CapabilityDescriptor],
    ) -> CompletionOutcome:
        """Send the transcript and capability list; never raises."""
        try:
            data = self._post(build_request_body(turns, descriptors))
        except CompletionServiceError as e:
            logger.error(f"Completion call to {self.config.model} failed: {e}")
            return ServiceError(str(e))
        return parse_response(data)

    def generate_text(self, prompt: str, system_instruction: Optional[str] = None) -> str:
        """
        Single-turn, tool-less completion used by the language tools.

        Raises:
            ToolExecutionError: the call failed or produced no text.
        """
        body = build_request_body([Turn.user_text(prompt)])
        if system_instruction:
            body["systemInstruction"] = {"parts": [{"text": system_instruction}]}
        try:
            data = self._post(body)
        except CompletionServiceError as e:
            raise ToolExecutionError(f"completion service error: {e}") from e

        outcome = parse_response(data)
        if isinstance(outcome, FinalAnswer):
            return outcome.text
        raise ToolExecutionError("completion service returned no text")
