from mcp import types

from mcp_stateless_server.arguments import GreetingArguments


async def greeting_prompt(arguments: GreetingArguments) -> types.GetPromptResult:
    return types.GetPromptResult(
        messages=[
            types.PromptMessage(
                role="user",
                content=types.TextContent(
                    type="text",
                    text=f"Please greet {arguments.name} in a friendly manner.",
                ),
            )
        ]
    )
