"""Tool implementations."""

from __future__ import annotations

import json
import random
import unicodedata
from typing import Any

import anyio

from mcp_stateless_server.arguments import (
    EchoJsonArguments,
    NotificationStreamArguments,
    RandomNumberArguments,
    ReverseTextArguments,
)
from mcp_stateless_server.exceptions import StreamCancelledError, ToolError
from mcp_stateless_server.notifications import SendNotification, completion_text, stream_notifications

ZERO_WIDTH_JOINER = "\u200d"
ECHO_PREFIX = "Echoed JSON: "


def _is_regional_indicator(char: str) -> bool:
    return "\U0001f1e6" <= char <= "\U0001f1ff"


def _is_extend(char: str) -> bool:
    if unicodedata.category(char) in ("Mn", "Me", "Mc"):
        return True
    return (
        char == ZERO_WIDTH_JOINER
        or "\ufe00" <= char <= "\ufe0f"  # variation selectors
        or "\U000e0100" <= char <= "\U000e01ef"  # variation selectors supplement
        or "\U0001f3fb" <= char <= "\U0001f3ff"  # emoji skin tone modifiers
        or "\U000e0020" <= char <= "\U000e007f"  # tags
        or "\u1160" <= char <= "\u11ff"  # hangul medial vowels and final consonants
    )


def _joins_previous(cluster: str, char: str) -> bool:
    prev = cluster[-1]
    # control characters, CR and LF included, always stand alone
    if unicodedata.category(prev) == "Cc" or unicodedata.category(char) == "Cc":
        return False
    if prev == ZERO_WIDTH_JOINER and len(cluster) > 1:
        return True
    if _is_extend(char):
        return True
    if _is_regional_indicator(char) and _is_regional_indicator(prev):
        # flags are pairs of regional indicators
        return sum(_is_regional_indicator(c) for c in cluster) % 2 == 1
    return False


def graphemes(text: str) -> list[str]:
    """Split text into user-perceived characters.

    This is an approximation of extended grapheme clusters that keeps the
    common multi-code-point sequences intact: combining marks, variation
    selectors, emoji modifiers and ZWJ sequences, flags, and hangul syllables
    written as jamo. Control characters are never joined, so CRLF is two
    clusters.
    """
    clusters: list[str] = []
    for char in text:
        if clusters and _joins_previous(clusters[-1], char):
            clusters[-1] += char
        else:
            clusters.append(char)
    return clusters


def reverse_text(text: str) -> str:
    return "".join(reversed(graphemes(text)))


def generate_random_number(min_value: int = 0, max_value: int = 100, *, rng: random.Random | None = None) -> int:
    """Pick an integer uniformly from the closed interval [min_value, max_value].

    Raises:
        ToolError: if min_value is greater than max_value
    """
    if min_value > max_value:
        raise ToolError(f"min must be less than or equal to max (got min={min_value}, max={max_value})")
    return (rng or random).randint(min_value, max_value)


def render_echo(data: dict[str, Any]) -> str:
    return ECHO_PREFIX + json.dumps(data, indent=2, ensure_ascii=False)


def parse_echo(text: str) -> dict[str, Any]:
    """Recover the object rendered by render_echo."""
    if not text.startswith(ECHO_PREFIX):
        raise ValueError("Not an echo-json result")
    return json.loads(text[len(ECHO_PREFIX) :])


async def reverse_text_tool(arguments: ReverseTextArguments) -> str:
    return f"Reversed text: {reverse_text(arguments.text)}"


async def random_number_tool(arguments: RandomNumberArguments) -> str:
    return f"Generated random number: {generate_random_number(arguments.min, arguments.max)}"


async def echo_json_tool(arguments: EchoJsonArguments) -> str:
    return render_echo(arguments.input)


async def notification_stream_tool(
    arguments: NotificationStreamArguments,
    send: SendNotification,
    cancel_event: anyio.Event | None = None,
) -> str:
    job = await stream_notifications(send, arguments.interval, arguments.count, cancel_event=cancel_event)
    if job.cancelled:
        raise StreamCancelledError(job.emitted_count, job.effective_count)
    return completion_text(job.interval_ms)
