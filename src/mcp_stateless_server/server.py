import contextlib
from collections.abc import AsyncIterator, Iterable
from typing import Any

import anyio
import click
import mcp.types as types
import uvicorn
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl, ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.routing import Mount
from starlette.types import ASGIApp, Receive, Scope, Send

from mcp_stateless_server import arguments, prompts, resources, tools
from mcp_stateless_server.exceptions import PromptError, ResourceError
from mcp_stateless_server.notifications import NotificationMessage
from mcp_stateless_server.registry import CapabilityRegistry
from mcp_stateless_server.settings import ServerSettings
from mcp_stateless_server.utilities.logging import configure_logging, get_logger

logger = get_logger(__name__)

NOTIFICATION_LOGGER = "notification_stream"


def build_registry() -> CapabilityRegistry:
    """Register the example prompt, tools and resource."""
    registry = CapabilityRegistry()

    # A prompt template provides the context structure and the variables the
    # client fills in.
    registry.register_prompt(
        "greeting-template",
        "A simple greeting prompt template",
        arguments.GreetingArguments,
        prompts.greeting_prompt,
    )

    registry.register_tool(
        "reverse-text",
        "Reverses a given string",
        arguments.ReverseTextArguments,
        tools.reverse_text_tool,
    )
    registry.register_tool(
        "generate-random-number",
        "Generates a random number between min and max",
        arguments.RandomNumberArguments,
        tools.random_number_tool,
    )
    registry.register_tool(
        "echo-json",
        "Returns the exact input JSON for testing serialization",
        arguments.EchoJsonArguments,
        tools.echo_json_tool,
    )
    registry.register_tool(
        "start-notification-stream",
        "Starts sending periodic notifications for testing resumability",
        arguments.NotificationStreamArguments,
        tools.notification_stream_tool,
    )

    greeting = resources.greeting_resource
    registry.register_resource(
        greeting.name,
        greeting.uri,
        greeting.read,
        mime_type=greeting.mime_type,
        description=greeting.description,
    )
    return registry


def create_server(
    settings: ServerSettings | None = None,
    registry: CapabilityRegistry | None = None,
) -> Server[Any, Any]:
    """Create a lowlevel MCP server backed by the registry."""
    settings = settings or ServerSettings()
    registry = registry or build_registry()
    app: Server[Any, Any] = Server(settings.name, version=settings.version)

    @app.list_prompts()
    async def list_prompts() -> list[types.Prompt]:
        return [prompt.to_mcp_prompt() for prompt in registry.list_prompts()]

    @app.get_prompt()
    async def get_prompt(name: str, arguments: dict[str, str] | None) -> types.GetPromptResult:
        try:
            return await registry.get_prompt(name, arguments)
        except (PromptError, ValidationError) as e:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=str(e))) from e

    @app.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [tool.to_mcp_tool() for tool in registry.list_tools()]

    @app.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.ContentBlock]:
        ctx = app.request_context

        async def send(message: NotificationMessage) -> None:
            await ctx.session.send_log_message(
                level=message.level,
                data=message.text,
                logger=NOTIFICATION_LOGGER,
                related_request_id=ctx.request_id,
            )

        text = await registry.call_tool(name, arguments, send=send)
        return [types.TextContent(type="text", text=text)]

    @app.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [resource.to_mcp_resource() for resource in registry.list_resources()]

    @app.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        try:
            return [await registry.read_resource(str(uri))]
        except ResourceError as e:
            raise McpError(e.error) from e

    # Registering a handler is what advertises the logging capability.
    @app.set_logging_level()
    async def set_logging_level(level: types.LoggingLevel) -> None:
        logger.info("Client requested log level %s", level)

    return app


def create_starlette_app(app: Server[Any, Any], settings: ServerSettings) -> ASGIApp:
    """Serve the MCP server over streamable HTTP in stateless mode."""
    # A fresh transport per request, and no event store to replay from
    session_manager = StreamableHTTPSessionManager(
        app=app,
        event_store=None,
        json_response=settings.json_response,
        stateless=True,
    )

    async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(starlette_app: Starlette) -> AsyncIterator[None]:
        """Context manager for session manager."""
        async with session_manager.run():
            logger.info("Application started with StreamableHTTP session manager!")
            try:
                yield
            finally:
                logger.info("Application shutting down...")

    starlette_app = Starlette(
        debug=settings.log_level == "DEBUG",
        routes=[Mount(settings.streamable_http_path, app=handle_streamable_http)],
        lifespan=lifespan,
    )

    # Expose Mcp-Session-Id to browser-based clients
    return CORSMiddleware(
        starlette_app,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE"],
        expose_headers=["Mcp-Session-Id"],
    )


async def run_stdio(app: Server[Any, Any]) -> None:
    from mcp.server.stdio import stdio_server

    async with stdio_server() as streams:
        await app.run(streams[0], streams[1], app.create_initialization_options())


@click.command()
@click.option(
    "--transport",
    type=click.Choice(["stdio", "streamable-http"]),
    default=None,
    help="Transport type",
)
@click.option("--host", default=None, help="Host to bind to for HTTP")
@click.option("--port", type=int, default=None, help="Port to listen on for HTTP")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Logging level",
)
@click.option(
    "--json-response",
    is_flag=True,
    default=False,
    help="Enable JSON responses instead of SSE streams",
)
def main(
    transport: str | None,
    host: str | None,
    port: int | None,
    log_level: str | None,
    json_response: bool,
) -> int:
    overrides = {
        "transport": transport,
        "host": host,
        "port": port,
        "log_level": log_level.upper() if log_level else None,
        "json_response": json_response or None,
    }
    settings = ServerSettings(**{key: value for key, value in overrides.items() if value is not None})
    configure_logging(settings.log_level)

    app = create_server(settings)
    logger.info("Starting %s %s over %s", settings.name, settings.version, settings.transport)

    if settings.transport == "stdio":
        anyio.run(run_stdio, app)
    else:
        uvicorn.run(create_starlette_app(app, settings), host=settings.host, port=settings.port)

    return 0
