"""In-process registry of the prompts, tools and resources a server exposes.

The registry only records definitions and dispatches calls to them; protocol
handling stays with the lowlevel MCP server that `create_server` wires it to.
"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import anyio
from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents
from pydantic import AnyUrl

from mcp_stateless_server.arguments import ArgumentsModel
from mcp_stateless_server.exceptions import RESOURCE_NOT_FOUND, PromptError, ResourceError, UnknownToolError
from mcp_stateless_server.notifications import SendNotification
from mcp_stateless_server.utilities.logging import get_logger

logger = get_logger(__name__)

ToolHandler = Callable[..., Awaitable[str]]
PromptHandler = Callable[[Any], Awaitable[types.GetPromptResult]]
ResourceHandler = Callable[[], Awaitable[ReadResourceContents]]


@dataclass
class RegisteredTool:
    name: str
    description: str
    arguments: type[ArgumentsModel]
    fn: ToolHandler

    @property
    def wants_send(self) -> bool:
        return "send" in inspect.signature(self.fn).parameters

    @property
    def wants_cancel_event(self) -> bool:
        return "cancel_event" in inspect.signature(self.fn).parameters

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(name=self.name, description=self.description, inputSchema=self.arguments.input_schema())

    async def run(
        self,
        arguments: dict[str, Any] | None,
        send: SendNotification | None = None,
        cancel_event: anyio.Event | None = None,
    ) -> str:
        validated = self.arguments.model_validate(arguments or {})
        kwargs: dict[str, Any] = {}
        if self.wants_send:
            if send is None:
                raise ValueError(f"Tool {self.name} needs a notification sender")
            kwargs["send"] = send
        if self.wants_cancel_event:
            kwargs["cancel_event"] = cancel_event
        return await self.fn(validated, **kwargs)


@dataclass
class RegisteredPrompt:
    name: str
    description: str
    arguments: type[ArgumentsModel]
    fn: PromptHandler

    def to_mcp_prompt(self) -> types.Prompt:
        return types.Prompt(
            name=self.name,
            description=self.description,
            arguments=[
                types.PromptArgument(name=field_name, description=field.description, required=field.is_required())
                for field_name, field in self.arguments.model_fields.items()
            ],
        )

    async def render(self, arguments: dict[str, str] | None) -> types.GetPromptResult:
        return await self.fn(self.arguments.model_validate(arguments or {}))


@dataclass
class RegisteredResource:
    name: str
    uri: str
    fn: ResourceHandler
    mime_type: str | None = None
    description: str | None = None

    def to_mcp_resource(self) -> types.Resource:
        return types.Resource(
            name=self.name,
            uri=AnyUrl(self.uri),
            mimeType=self.mime_type,
            description=self.description,
        )


class CapabilityRegistry:
    """Maps names (and URIs, for resources) to their handlers."""

    def __init__(self, warn_on_duplicates: bool = True):
        self._tools: dict[str, RegisteredTool] = {}
        self._prompts: dict[str, RegisteredPrompt] = {}
        self._resources: dict[str, RegisteredResource] = {}
        self.warn_on_duplicates = warn_on_duplicates

    def register_tool(
        self,
        name: str,
        description: str,
        arguments: type[ArgumentsModel],
        handler: ToolHandler,
    ) -> RegisteredTool:
        """Register a tool.

        The handler receives the validated arguments model. Handlers that
        declare a ``send`` parameter are also given a notification sender for
        out-of-band messages during the call, and those that declare
        ``cancel_event`` receive the event passed to ``call_tool``.
        """
        if name in self._tools:
            if self.warn_on_duplicates:
                logger.warning("Tool already exists: %s", name)
            return self._tools[name]
        tool = RegisteredTool(name=name, description=description, arguments=arguments, fn=handler)
        self._tools[name] = tool
        logger.debug("Registered tool %s", name)
        return tool

    def register_prompt(
        self,
        name: str,
        description: str,
        arguments: type[ArgumentsModel],
        handler: PromptHandler,
    ) -> RegisteredPrompt:
        if name in self._prompts:
            if self.warn_on_duplicates:
                logger.warning("Prompt already exists: %s", name)
            return self._prompts[name]
        prompt = RegisteredPrompt(name=name, description=description, arguments=arguments, fn=handler)
        self._prompts[name] = prompt
        logger.debug("Registered prompt %s", name)
        return prompt

    def register_resource(
        self,
        name: str,
        uri: str,
        handler: ResourceHandler,
        *,
        mime_type: str | None = None,
        description: str | None = None,
    ) -> RegisteredResource:
        if uri in self._resources:
            if self.warn_on_duplicates:
                logger.warning("Resource already exists: %s", uri)
            return self._resources[uri]
        resource = RegisteredResource(name=name, uri=uri, fn=handler, mime_type=mime_type, description=description)
        self._resources[uri] = resource
        logger.debug("Registered resource %s at %s", name, uri)
        return resource

    def list_tools(self) -> list[RegisteredTool]:
        return list(self._tools.values())

    def list_prompts(self) -> list[RegisteredPrompt]:
        return list(self._prompts.values())

    def list_resources(self) -> list[RegisteredResource]:
        return list(self._resources.values())

    async def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        send: SendNotification | None = None,
        cancel_event: anyio.Event | None = None,
    ) -> str:
        tool = self._tools.get(name)
        if tool is None:
            raise UnknownToolError(name)
        logger.debug("Calling tool %s", name)
        return await tool.run(arguments, send=send, cancel_event=cancel_event)

    async def get_prompt(self, name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
        prompt = self._prompts.get(name)
        if prompt is None:
            raise PromptError(f"Unknown prompt: {name}")
        return await prompt.render(arguments)

    async def read_resource(self, uri: str) -> ReadResourceContents:
        resource = self._resources.get(uri)
        if resource is None:
            raise ResourceError(f"Unknown resource: {uri}", code=RESOURCE_NOT_FOUND)
        return await resource.fn()
