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

"""Registry of tool instances and their capability schemas.

Collision policy: last registration wins everywhere. Re-registering a tool
kind replaces it and moves it to the end of registration order. A
structured function name or inline tag declared by two tool kinds resolves
to the one registered last. Every collision is logged as a warning when the
second registration happens.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import RegistrationError
from .schema import CapabilityEntry, Dialect, InlineSchema, StructuredSchema
from .tool import Tool

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ToolRegistration:
    """A registered tool instance and its retained capabilities."""

    tool_kind: str
    instance: Tool
    capabilities: Mapping[str, CapabilityEntry]
    allowed_function_names: frozenset[str] | None = None

    def has_dialect(self, dialect: Dialect) -> bool:
        return any(entry.dialect is dialect for entry in self.capabilities.values())


@dataclass(frozen=True, slots=True)
class RegistryStats:
    """Counts over all registrations.

    A tool with capabilities of both dialects counts toward both
    `tools_with_inline` and `tools_with_structured`.
    """

    total_tools: int
    total_functions: int
    tools_with_inline: int
    tools_with_structured: int


class ToolRegistry:
    """Registry for managing and accessing tools.

    Holds one instance per tool kind (the tool class name) together with its
    capability map, optionally filtered to a subset of function names.
    All methods are thread-safe.

    Example:
        >>> registry = ToolRegistry()
        >>> registry.register(WebSearchTool, function_names=["web-search"])
        >>> registry.get_tool_by_tag("web-search")
        <WebSearchTool object at ...>
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._tools: dict[str, ToolRegistration] = {}
        # Derived indexes, rebuilt on every registration change
        self._tag_index: dict[str, CapabilityEntry] = {}
        self._function_index: dict[str, CapabilityEntry] = {}

        logger.debug("initialized new ToolRegistry")

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register(
        self,
        tool_cls: type[Tool],
        *args: Any,
        function_names: Iterable[str] | None = None,
        **kwargs: Any,
    ) -> ToolRegistration:
        """Instantiate and register a tool.

        Args:
            tool_cls: Tool class; its name is the tool kind.
            *args: Positional arguments passed to the tool constructor.
            function_names: Function names to retain. None or empty retains
                all; names the tool does not declare are ignored.
            **kwargs: Keyword arguments passed to the tool constructor.

        Returns:
            The stored registration.

        Raises:
            RegistrationError: If construction fails or the tool exposes no
                valid capability map.
        """
        tool_kind = tool_cls.__name__

        try:
            instance = tool_cls(*args, **kwargs)
        except Exception as e:
            logger.error(f"Failed to construct tool {tool_kind}: {e}")
            raise RegistrationError(f"Failed to construct tool {tool_kind}: {e}", tool_kind=tool_kind) from e

        get_capabilities = getattr(tool_cls, "get_capabilities", None)
        if get_capabilities is None:
            raise RegistrationError(f"Tool {tool_kind} does not expose get_capabilities()", tool_kind=tool_kind)
        try:
            all_capabilities = get_capabilities()
        except Exception as e:
            logger.error(f"Failed to read capabilities of {tool_kind}: {e}")
            raise RegistrationError(f"Failed to read capabilities of {tool_kind}: {e}", tool_kind=tool_kind) from e
        if not isinstance(all_capabilities, Mapping):
            raise RegistrationError(
                f"Tool {tool_kind} returned no capability map (got {type(all_capabilities).__name__})",
                tool_kind=tool_kind,
            )

        allowed = frozenset(function_names) if function_names else None
        if allowed:
            capabilities = {name: entry for name, entry in all_capabilities.items() if name in allowed}
            dropped = allowed - capabilities.keys()
            if dropped:
                logger.debug(f"{tool_kind}: ignoring undeclared function names {sorted(dropped)}")
        else:
            capabilities = dict(all_capabilities)

        registration = ToolRegistration(
            tool_kind=tool_kind,
            instance=instance,
            capabilities=capabilities,
            allowed_function_names=allowed,
        )

        with self._lock:
            # Re-registration moves the kind to the end of registration order
            if self._tools.pop(tool_kind, None) is not None:
                logger.warning(f"Tool {tool_kind} is already registered, replacing it")
                self._rebuild_indexes()
            self._warn_on_collisions(registration)
            self._tools[tool_kind] = registration
            self._rebuild_indexes()

        logger.info(f"Registered tool {tool_kind} with functions: {list(capabilities)}")
        return registration

    def clear(self) -> None:
        """Drop all registrations."""
        with self._lock:
            self._tools = {}
            self._rebuild_indexes()
        logger.info("Cleared all registered tools")

    def _warn_on_collisions(self, registration: ToolRegistration) -> None:
        for name, entry in registration.capabilities.items():
            index = self._tag_index if entry.dialect is Dialect.INLINE else self._function_index
            existing = index.get(name)
            if existing is not None and existing.owner_tool_kind != registration.tool_kind:
                logger.warning(
                    f"{entry.dialect.value} function {name!r} of {registration.tool_kind} "
                    f"shadows the one registered by {existing.owner_tool_kind}"
                )

    def _rebuild_indexes(self) -> None:
        tag_index: dict[str, CapabilityEntry] = {}
        function_index: dict[str, CapabilityEntry] = {}
        for registration in self._tools.values():
            for name, entry in registration.capabilities.items():
                if entry.dialect is Dialect.INLINE:
                    tag_index[name] = entry
                else:
                    function_index[name] = entry
        self._tag_index = tag_index
        self._function_index = function_index

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_tool(self, tool_kind: str) -> Tool | None:
        with self._lock:
            registration = self._tools.get(tool_kind)
        return registration.instance if registration else None

    def get_tool_by_tag(self, tag: str) -> Tool | None:
        """Get the tool instance declaring inline tag `tag`."""
        with self._lock:
            entry = self._tag_index.get(tag)
            registration = self._tools.get(entry.owner_tool_kind) if entry else None
        return registration.instance if registration else None

    def find_capability(self, name: str) -> CapabilityEntry | None:
        """Resolve an inline tag or structured function name (tags first)."""
        with self._lock:
            entry = self._tag_index.get(name) or self._function_index.get(name)
        logger.debug(f"capability lookup {name!r}: {entry.owner_tool_kind if entry else 'miss'}")
        return entry

    def get_capability_schemas(self, tool_kind: str) -> dict[str, CapabilityEntry] | None:
        with self._lock:
            registration = self._tools.get(tool_kind)
        return dict(registration.capabilities) if registration else None

    def get_registration(self, tool_kind: str) -> ToolRegistration | None:
        with self._lock:
            return self._tools.get(tool_kind)

    def has_tool(self, tool_kind: str) -> bool:
        with self._lock:
            return tool_kind in self._tools

    def list_tool_kinds(self) -> list[str]:
        with self._lock:
            return list(self._tools)

    # -------------------------------------------------------------------------
    # Aggregate views
    # -------------------------------------------------------------------------

    def get_all_tools(self) -> dict[str, Tool]:
        with self._lock:
            return {kind: registration.instance for kind, registration in self._tools.items()}

    def get_all_structured_schemas(self) -> dict[str, StructuredSchema]:
        """Structured schemas of every registered tool, keyed by function name."""
        with self._lock:
            return {
                name: entry.schema
                for name, entry in self._function_index.items()
                if isinstance(entry.schema, StructuredSchema)
            }

    def get_all_inline_examples(self) -> dict[str, str]:
        """Usage examples of every inline capability, keyed by tag."""
        with self._lock:
            return {
                tag: entry.schema.usage_example
                for tag, entry in self._tag_index.items()
                if isinstance(entry.schema, InlineSchema)
            }

    def stats(self) -> RegistryStats:
        with self._lock:
            registrations = list(self._tools.values())
        return RegistryStats(
            total_tools=len(registrations),
            total_functions=sum(len(r.capabilities) for r in registrations),
            tools_with_inline=sum(1 for r in registrations if r.has_dialect(Dialect.INLINE)),
            tools_with_structured=sum(1 for r in registrations if r.has_dialect(Dialect.STRUCTURED)),
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._tools)

    def __contains__(self, tool_kind: object) -> bool:
        with self._lock:
            return tool_kind in self._tools
