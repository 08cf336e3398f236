#!/usr/bin/env python3
"""Example: register a tool, advertise its schemas and run inline tool calls.

The model output below is canned; in an agent loop it comes from the LLM.

Usage:
    python examples/search_agent.py
"""

import asyncio
import json
import logging

from typing_extensions import override

from agentpress import (
    InlineParameter,
    InlineSchema,
    StructuredSchema,
    Tool,
    ToolDispatcher,
    ToolRegistry,
    ToolResult,
    parse_invocations,
)

CATALOG = {
    "cats": ["Cat - Wikipedia", "Caring for your cat"],
    "dogs": ["Dog - Wikipedia"],
}


class CatalogSearchTool(Tool):
    """Searches a small in-memory catalog."""

    @classmethod
    @override
    def declare_capabilities(cls):
        return [
            (
                "search",
                StructuredSchema(
                    name="web_search",
                    description="Search the catalog",
                    properties={
                        "query": {"type": "string", "description": "Search query"},
                        "num_results": {"type": "number", "description": "Maximum number of results"},
                    },
                    required={"query"},
                ),
            ),
            (
                "search",
                InlineSchema(
                    tag="web-search",
                    description="Search the catalog",
                    parameters=(
                        InlineParameter("query", "string", "Search query", required=True),
                        InlineParameter("num_results", "number", "Maximum number of results"),
                    ),
                ),
            ),
        ]

    async def search(self, query: str, num_results: int = 10) -> ToolResult:
        hits = CATALOG.get(query.lower(), [])[:num_results]
        if not hits:
            return self.failure(f"No results for {query!r}")
        return self.success("\n".join(hits), {"result_count": len(hits)})


MODEL_OUTPUT = """Let me search for that.
<function_calls>
<invoke name="web-search">
<parameter name="query">cats</parameter>
<parameter name="num_results">1</parameter>
</invoke>
<invoke name="web-search">
<parameter name="query">
</invoke>
</function_calls>"""


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s | %(name)s | %(levelname)s | %(message)s")

    # -------------------------------------------------------------------------
    # 1. Registration
    # -------------------------------------------------------------------------

    registry = ToolRegistry()
    registry.register(CatalogSearchTool)

    print("\n[Structured schemas]:")
    print(json.dumps([s.to_openai_schema() for s in registry.get_all_structured_schemas().values()], indent=2))
    print("\n[Inline examples]:")
    for tag, example in registry.get_all_inline_examples().items():
        print(f"{tag}:\n{example}")

    # -------------------------------------------------------------------------
    # 2. Parsing and dispatch
    # -------------------------------------------------------------------------

    outcome = parse_invocations(MODEL_OUTPUT)
    print(f"\n[Leftover text]: {outcome.leftover_text}")
    for error in outcome.errors:
        print(f"[Parse error]: {error}")

    results = await ToolDispatcher(registry).dispatch_all(outcome)
    for invocation, result in zip(outcome.invocations, results):
        print(f"\n[{invocation.name} {invocation.parameters}]: {json.dumps(result.to_dict(), indent=2)}")

    print(f"\n[Registry stats]: {registry.stats()}")


if __name__ == "__main__":
    asyncio.run(main())
