"""
Google Gemini backend for the chat orchestrator.

Translates the vendor-neutral transcript (chat messages, tool requests, tool
responses) into `google-genai` Content objects, declares the search tool as a
function, and maps the model's reply back to a ToolRequest or FinalText.
"""

import logging
import time
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from ..errors import UpstreamError
from ..models import (
    ChatMessage,
    FinalText,
    ModelTurn,
    ToolCall,
    ToolRequest,
    ToolResponse,
    TranscriptEntry,
)
from .tools import ToolDescriptor


logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-2.0-flash"

_SCHEMA_TYPES = {
    "object": types.Type.OBJECT,
    "string": types.Type.STRING,
    "integer": types.Type.INTEGER,
    "number": types.Type.NUMBER,
    "boolean": types.Type.BOOLEAN,
    "array": types.Type.ARRAY,
}


def to_schema(spec: dict) -> types.Schema:
    """Convert a JSON-schema style parameter dict into a Gemini Schema."""
    kwargs: dict[str, Any] = {"type": _SCHEMA_TYPES[spec["type"]]}
    if "description" in spec:
        kwargs["description"] = spec["description"]
    if "properties" in spec:
        kwargs["properties"] = {name: to_schema(prop) for name, prop in spec["properties"].items()}
    if "required" in spec:
        kwargs["required"] = list(spec["required"])
    if "items" in spec:
        kwargs["items"] = to_schema(spec["items"])
    return types.Schema(**kwargs)


def to_function_declaration(descriptor: ToolDescriptor) -> types.FunctionDeclaration:
    return types.FunctionDeclaration(
        name=descriptor.name,
        description=descriptor.description,
        parameters=to_schema(descriptor.parameters),
    )


def to_contents(transcript: Sequence[TranscriptEntry]) -> list[types.Content]:
    """Build Gemini contents from the transcript.

    Consecutive tool responses are grouped into a single user Content, which
    is how Gemini expects answers to parallel function calls.
    """
    contents: list[types.Content] = []
    grouping_responses = False

    for entry in transcript:
        if isinstance(entry, ToolResponse):
            part = types.Part.from_function_response(name=entry.name, response=entry.response)
            if grouping_responses:
                contents[-1].parts.append(part)
            else:
                contents.append(types.Content(role="user", parts=[part]))
                grouping_responses = True
            continue

        grouping_responses = False
        if isinstance(entry, ChatMessage):
            if not entry.content:
                continue
            contents.append(types.Content(role=entry.role, parts=[types.Part(text=entry.content)]))
        elif isinstance(entry, ToolRequest):
            if isinstance(entry.raw, types.Content):
                # Echo the original turn so thought signatures survive
                contents.append(entry.raw)
            else:
                contents.append(types.Content(
                    role="model",
                    parts=[
                        types.Part(function_call=types.FunctionCall(name=c.name, args=dict(c.args)))
                        for c in entry.calls
                    ],
                ))
        else:
            raise TypeError(f"Unsupported transcript entry: {entry!r}")

    return contents


def parse_response(response: types.GenerateContentResponse) -> ModelTurn:
    """Map a Gemini response to a ToolRequest or FinalText."""
    candidates = response.candidates or []
    if not candidates or candidates[0].content is None:
        feedback = getattr(response, "prompt_feedback", None)
        raise UpstreamError(f"Gemini returned no content (feedback: {feedback})")

    content = candidates[0].content
    parts = content.parts or []

    calls = [
        ToolCall(name=part.function_call.name or "", args=dict(part.function_call.args or {}))
        for part in parts
        if part.function_call is not None
    ]
    if calls:
        return ToolRequest(calls=tuple(calls), raw=content)

    text = "".join(part.text for part in parts if part.text and not part.thought)
    return FinalText(text=text)


class GeminiChatModel:
    """ChatModel implementation backed by `google-genai`."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout_seconds: float = 30.0,
        temperature: float = 0.2,
        max_retries: int = 2,
        client: Optional[Any] = None,
    ):
        """Initialize the Gemini backend.

        Args:
            api_key: Gemini API key (ignored when `client` is given)
            model: Gemini model name
            timeout_seconds: HTTP timeout for each request
            temperature: Sampling temperature
            max_retries: Attempts per turn when rate limited
            client: Pre-built `genai.Client` (tests inject a mock here)
        """
        if client is None:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
            )
        self.client = client
        self.model = model
        self.temperature = temperature
        self.max_retries = max_retries

    def send_turn(
        self,
        transcript: Sequence[TranscriptEntry],
        tools: Sequence[ToolDescriptor],
        system_instruction: str,
    ) -> ModelTurn:
        config = types.GenerateContentConfig(
            system_instruction=system_instruction,
            temperature=self.temperature,
            tools=[
                types.Tool(function_declarations=[to_function_declaration(t) for t in tools])
            ] if tools else None,
            automatic_function_calling=types.AutomaticFunctionCallingConfig(disable=True),
        )
        contents = to_contents(transcript)

        last_error: Optional[Exception] = None
        for attempt in range(max(1, self.max_retries)):
            try:
                response = self.client.models.generate_content(
                    model=self.model,
                    contents=contents,
                    config=config,
                )
                return parse_response(response)
            except UpstreamError:
                raise
            except Exception as e:
                last_error = e
                error_str = str(e)
                logger.warning(f"[GEMINI] {self.model} failed (attempt {attempt + 1}): {error_str[:200]}")
                if ("429" in error_str or "RESOURCE_EXHAUSTED" in error_str) and attempt < self.max_retries - 1:
                    time.sleep(attempt + 1)
                    continue
                break

        raise UpstreamError(f"Gemini request failed: {last_error}") from last_error
