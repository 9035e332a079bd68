from dataclasses import dataclass

from mcp.server.lowlevel.helper_types import ReadResourceContents

GREETING_URI = "https://example.com/greetings/default"


@dataclass(frozen=True)
class StaticTextResource:
    """A read-only text payload addressed by a fixed URI."""

    name: str
    uri: str
    text: str
    mime_type: str = "text/plain"
    description: str | None = None

    async def read(self) -> ReadResourceContents:
        return ReadResourceContents(content=self.text, mime_type=self.mime_type)


greeting_resource = StaticTextResource(
    name="greeting-resource",
    uri=GREETING_URI,
    text="Hello, world!",
    description="A default greeting",
)
