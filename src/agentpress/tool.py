# Copyright 2025 Horizon RL Contributors

# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at

#     http://www.apache.org/licenses/LICENSE-2.0

# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Base class for tools exposing capabilities to an agent.

Capabilities are declared statically per tool class: a subclass overrides
`declare_capabilities` and returns `(method_name, schema)` pairs. The same
method may appear twice, once per dialect, to support both calling
conventions.

Example:
    >>> class WebSearchTool(Tool):
    ...     @classmethod
    ...     def declare_capabilities(cls):
    ...         return [
    ...             ("search", StructuredSchema(name="web_search", description="Search the web",
    ...                                         properties={"query": {"type": "string"}}, required={"query"})),
    ...             ("search", InlineSchema(tag="web-search", description="Search the web",
    ...                                     parameters=[InlineParameter("query", required=True)])),
    ...         ]
    ...
    ...     async def search(self, query: str) -> ToolResult:
    ...         return self.success(f"results for {query}")
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import lru_cache
from types import MappingProxyType
from typing import Any

from .schema import CapabilityEntry, CapabilitySchema, InlineSchema, StructuredSchema, ToolResult


class Tool:
    """Base class for tools.

    Subclasses declare their capabilities with `declare_capabilities` and
    return `ToolResult` envelopes from their capability methods (see
    `success` / `failure`).
    """

    @classmethod
    def declare_capabilities(cls) -> Iterable[tuple[str, CapabilitySchema]]:
        """Return the `(method_name, schema)` pairs this tool type exposes."""
        return ()

    @classmethod
    def get_capabilities(cls) -> Mapping[str, CapabilityEntry]:
        """Full capability map of this tool type, keyed by function name.

        Built once per class.

        Raises:
            ValueError: If a declaration names a missing method, a function
                name is declared twice, or a schema has an unknown type.
        """
        return _build_capabilities(cls)

    @classmethod
    def get_structured_schemas(cls) -> dict[str, StructuredSchema]:
        return {
            name: entry.schema
            for name, entry in cls.get_capabilities().items()
            if isinstance(entry.schema, StructuredSchema)
        }

    @classmethod
    def get_inline_schemas(cls) -> dict[str, InlineSchema]:
        return {
            name: entry.schema
            for name, entry in cls.get_capabilities().items()
            if isinstance(entry.schema, InlineSchema)
        }

    @classmethod
    def get_inline_examples(cls) -> dict[str, str]:
        return {tag: schema.usage_example for tag, schema in cls.get_inline_schemas().items()}

    def missing_parameters(self, function_name: str, parameters: Mapping[str, Any]) -> list[str]:
        """Return required parameters of `function_name` absent from `parameters`.

        Unknown function names have no requirements.
        """
        entry = self.get_capabilities().get(function_name)
        if entry is None:
            return []
        return sorted(name for name in entry.required if name not in parameters)

    def success(self, output: Any = None, metadata: dict[str, Any] | None = None) -> ToolResult:
        return ToolResult.success(output, metadata)

    def failure(self, message: str, metadata: dict[str, Any] | None = None) -> ToolResult:
        return ToolResult.failure(message, metadata)


@lru_cache(maxsize=None)
def _build_capabilities(tool_cls: type[Tool]) -> Mapping[str, CapabilityEntry]:
    capabilities: dict[str, CapabilityEntry] = {}
    for method, schema in tool_cls.declare_capabilities():
        if not callable(getattr(tool_cls, method, None)):
            raise ValueError(f"{tool_cls.__name__} declares a capability for missing method {method!r}")
        if not isinstance(schema, (StructuredSchema, InlineSchema)):
            raise ValueError(f"{tool_cls.__name__}.{method}: unsupported schema type {type(schema).__name__}")

        function_name = schema.function_name
        if not function_name:
            raise ValueError(f"{tool_cls.__name__}.{method}: empty function name")
        if function_name in capabilities:
            raise ValueError(f"{tool_cls.__name__} declares function {function_name!r} more than once")

        capabilities[function_name] = CapabilityEntry(
            owner_tool_kind=tool_cls.__name__,
            function_name=function_name,
            dialect=schema.dialect,
            schema=schema,
            method=method,
        )
    return MappingProxyType(capabilities)
