"""Declared input contracts for the prompt and tools.

Each model is published as the JSON schema of its tool or prompt and is used
again on call to validate the raw arguments and fill in defaults.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from mcp_stateless_server.notifications import DEFAULT_COUNT, DEFAULT_INTERVAL_MS


class ArgumentsModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @classmethod
    def input_schema(cls) -> dict[str, Any]:
        """JSON schema of the arguments, as advertised by tools/list."""
        schema = cls.model_json_schema()
        schema.pop("title", None)
        return schema


class GreetingArguments(ArgumentsModel):
    name: str = Field(description="Name to include in greeting")


class ReverseTextArguments(ArgumentsModel):
    text: str = Field(description="The text to reverse")


class RandomNumberArguments(ArgumentsModel):
    min: int = Field(default=0, description="Lower bound, inclusive")
    max: int = Field(default=100, description="Upper bound, inclusive")


class EchoJsonArguments(ArgumentsModel):
    input: dict[str, Any] = Field(description="JSON object to echo back")


class NotificationStreamArguments(ArgumentsModel):
    interval: int = Field(default=DEFAULT_INTERVAL_MS, ge=0, description="Interval in milliseconds between notifications")
    count: int = Field(default=DEFAULT_COUNT, ge=0, description="Number of notifications to send (0 for 100)")
