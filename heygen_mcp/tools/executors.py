"""
Tool Executors - The actual implementation of tools.

Every executor receives:
- arguments: an already validated input model
- context: the secrets this tool declared, plus HeyGen settings

SECURITY RULES:
1. Never log secrets
2. Never include secrets in return values
3. Report vendor failures as result text, never raise them to the caller
"""

from __future__ import annotations

import json
import math
import operator
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field

from ..config import HeyGenConfig
from . import ToolResult
from .schemas import AddInput, CalculateInput, CreateHeygenVideoInput

VIDEO_GENERATE_PATH = "/v2/video/generate"
VIDEO_WIDTH = 1280
VIDEO_HEIGHT = 720

DIVIDE_BY_ZERO_MESSAGE = "Error: Cannot divide by zero"


@dataclass(frozen=True)
class ToolContext:
    """Per-invocation context handed to executors by the registry."""

    secrets: dict[str, str] = field(default_factory=dict)
    heygen: HeyGenConfig = field(default_factory=HeyGenConfig)
    # Lets tests swap the network for httpx.MockTransport
    transport: httpx.BaseTransport | None = None


def _float_text(value: float) -> str:
    text = repr(value)
    if "e" not in text:
        return text
    mantissa, exponent = text.split("e")
    power = int(exponent)
    if -6 <= power < 0:
        sign = "-" if mantissa.startswith("-") else ""
        digits = mantissa.lstrip("-").replace(".", "")
        return f"{sign}0.{'0' * (-power - 1)}{digits}"
    return f"{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def format_number(value: int | float) -> str:
    """Render a number as result text.

    Integral floats drop their trailing ``.0`` (``4 / 2`` gives ``"2"``).
    Infinities and NaN are spelled Infinity, -Infinity and NaN. Other floats
    use the shortest round-tripping digits, positional from 1e-6 up to 1e21
    and otherwise with an unpadded exponent (``1e-7``, ``1.5e+300``).
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _float_text(value)
    return str(value)


def _saturate(value: int | float) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.inf if value > 0 else -math.inf


def _apply(op: Callable[[Any, Any], int | float], a: int | float, b: int | float) -> int | float:
    try:
        return op(a, b)
    except OverflowError:
        # An int beyond float range met a float (or an int quotient); it saturates
        return op(_saturate(a), _saturate(b))


OPERATIONS: dict[str, Callable[[Any, Any], int | float]] = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


# =============================================================================
# Arithmetic Executors
# =============================================================================


def execute_add(arguments: AddInput, context: ToolContext) -> ToolResult:
    """Add two numbers."""
    return ToolResult.text(format_number(_apply(operator.add, arguments.a, arguments.b)))


def execute_calculate(arguments: CalculateInput, context: ToolContext) -> ToolResult:
    """
    Run one of add/subtract/multiply/divide.

    Division by zero is a reported outcome, not an error.
    """
    if arguments.operation == "divide" and arguments.b == 0:
        return ToolResult.text(DIVIDE_BY_ZERO_MESSAGE)

    result = _apply(OPERATIONS[arguments.operation], arguments.a, arguments.b)
    return ToolResult.text(format_number(result))


# =============================================================================
# HeyGen Video Executor
# =============================================================================


class Character(BaseModel):
    type: Literal["avatar"] = "avatar"
    avatar_id: str
    avatar_style: str = "normal"


class Voice(BaseModel):
    type: Literal["text"] = "text"
    input_text: str
    voice_id: str


class Background(BaseModel):
    type: Literal["color"] = "color"
    value: str


class VideoInput(BaseModel):
    character: Character
    voice: Voice
    background: Background | None = None


class Dimension(BaseModel):
    width: int = VIDEO_WIDTH
    height: int = VIDEO_HEIGHT


class VideoRequest(BaseModel):
    """Request body for POST /v2/video/generate."""

    video_inputs: list[VideoInput]
    dimension: Dimension = Field(default_factory=Dimension)

    def to_payload(self) -> dict[str, Any]:
        # Unset background must be absent from the JSON, not null
        return self.model_dump(exclude_none=True)


def build_video_request(arguments: CreateHeygenVideoInput) -> VideoRequest:
    """Build the HeyGen request body for a single avatar clip."""
    background = Background(value=arguments.background) if arguments.background else None
    return VideoRequest(
        video_inputs=[
            VideoInput(
                character=Character(avatar_id=arguments.avatar_id),
                voice=Voice(input_text=arguments.input_text, voice_id=arguments.voice_id),
                background=background,
            )
        ]
    )


@dataclass(frozen=True)
class VideoCreated:
    video_id: str


@dataclass(frozen=True)
class VendorError:
    detail: Any


@dataclass(frozen=True)
class Unrecognized:
    payload: Any


VendorOutcome = VideoCreated | VendorError | Unrecognized


def _compact_json(value: Any) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def decode_video_response(payload: Any) -> VendorOutcome:
    """
    Classify a 2xx HeyGen response body.

    The vendor contract is not ours, so nothing about the shape is assumed.
    """
    if not isinstance(payload, dict):
        return Unrecognized(payload)

    error = payload.get("error")
    if error:
        return VendorError(error)

    data = payload.get("data")
    if isinstance(data, dict) and data.get("video_id") is not None:
        return VideoCreated(str(data["video_id"]))

    return Unrecognized(payload)


def describe_outcome(outcome: VendorOutcome) -> str:
    if isinstance(outcome, VideoCreated):
        return f"HeyGen video created! video_id: {outcome.video_id}"
    if isinstance(outcome, VendorError):
        return f"HeyGen API error: {_compact_json(outcome.detail)}"
    return f"HeyGen API error: unrecognized response: {_compact_json(outcome.payload)}"


def execute_create_heygen_video(
    arguments: CreateHeygenVideoInput, context: ToolContext
) -> ToolResult:
    """
    Ask HeyGen to render an avatar video.

    Makes exactly one POST and never retries. Every failure (HTTP status,
    vendor error payload, network or decoding failure) comes back as text.

    SECURITY: The api_key goes into the request header only.
    """
    api_key = context.secrets.get("api_key", "")
    body = build_video_request(arguments)
    headers = {"X-Api-Key": api_key, "Content-Type": "application/json"}

    try:
        with httpx.Client(
            base_url=context.heygen.base_url,
            timeout=context.heygen.timeout,
            transport=context.transport,
        ) as client:
            response = client.post(VIDEO_GENERATE_PATH, headers=headers, json=body.to_payload())

            if not response.is_success:
                return ToolResult.text(f"HeyGen API error: {response.status_code} {response.text}")

            data = response.json()
    except (httpx.HTTPError, ValueError) as e:
        return ToolResult.text(f"Request failed: {e}")

    return ToolResult.text(describe_outcome(decode_video_response(data)))


# =============================================================================
# Executor Registry
# =============================================================================

ToolExecutor = Callable[[Any, ToolContext], ToolResult]

# Maps executor names used in tools.yml to executor functions
TOOL_EXECUTORS: dict[str, ToolExecutor] = {
    "add": execute_add,
    "calculate": execute_calculate,
    "create_heygen_video": execute_create_heygen_video,
}
