"""Documentation tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import SearchDocumentationInput


def _search_documentation(client, config):
    async def run(ctx: dict[str, Any], params: SearchDocumentationInput) -> Any:
        return await client.search_documentation(params.query)

    return run


search_documentation = ToolDescriptor(
    method="search_documentation",
    name="Search documentation",
    description="""
    Search the Knock documentation for the given query. Use this tool when you need
    to answer a question about how a feature works or how to use the API.
    """,
    parameters=SearchDocumentationInput,
    execute=_search_documentation,
)

TOOLS = [search_documentation]

PERMISSIONS = {"read": ["search_documentation"]}
