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

"""Dispatch of parsed invocations to registered tools.

Every outcome is a `ToolResult`: unknown names, missing required
parameters and exceptions raised by a tool become failed envelopes that the
agent loop can feed back to the model.
"""

from __future__ import annotations

import inspect
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .parser import ParsedInvocation, ParseOutcome
from .registry import ToolRegistry
from .schema import ToolResult

logger = logging.getLogger(__name__)


class ToolDispatcher:
    """Resolves invocations through a `ToolRegistry` and executes them.

    Example:
        >>> dispatcher = ToolDispatcher(registry)
        >>> outcome = parse_invocations(model_output)
        >>> results = await dispatcher.dispatch_all(outcome)
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self.registry = registry

    async def dispatch(self, invocation: ParsedInvocation) -> ToolResult:
        """Execute one invocation.

        The name is resolved as an inline tag first, then as a structured
        function name.
        """
        entry = self.registry.find_capability(invocation.name)
        if entry is None:
            logger.warning(f"No registered capability named {invocation.name!r}")
            return ToolResult.failure(f"Unknown tool: {invocation.name}")

        instance = self.registry.get_tool(entry.owner_tool_kind)
        if instance is None:
            # Cleared between lookup and execution
            return ToolResult.failure(f"Unknown tool: {invocation.name}")

        missing = instance.missing_parameters(entry.function_name, invocation.parameters)
        if missing:
            return ToolResult.failure(f"Missing required parameters for {invocation.name}: {', '.join(missing)}")

        method = getattr(instance, entry.method)
        logger.debug(f"dispatching {invocation.name!r} to {entry.owner_tool_kind}.{entry.method}")
        try:
            result = method(**invocation.parameters)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.exception(f"Tool {entry.owner_tool_kind}.{entry.method} failed")
            return ToolResult.failure(f"Error executing {invocation.name}: {e}")

        if isinstance(result, ToolResult):
            return result
        return ToolResult.success(result)

    async def dispatch_function_call(self, name: str, arguments: Mapping[str, Any] | str | None = None) -> ToolResult:
        """Execute a structured function call.

        Args:
            name: Function name.
            arguments: Arguments as a mapping or a JSON-encoded object.
        """
        if isinstance(arguments, str):
            raw = arguments
            try:
                decoded = json.loads(arguments) if arguments.strip() else {}
            except json.JSONDecodeError as e:
                logger.warning(f"Invalid arguments for {name!r}: {e}")
                return ToolResult.failure(f"Invalid JSON arguments for {name}: {e}")
            if not isinstance(decoded, dict):
                return ToolResult.failure(f"Arguments for {name} must be a JSON object")
            parameters = decoded
        else:
            parameters = dict(arguments or {})
            raw = json.dumps(parameters, default=str)

        return await self.dispatch(ParsedInvocation(name=name, parameters=parameters, raw=raw))

    async def dispatch_all(self, invocations: ParseOutcome | Iterable[ParsedInvocation]) -> list[ToolResult]:
        """Execute invocations sequentially, in document order."""
        if isinstance(invocations, ParseOutcome):
            invocations = invocations.invocations
        return [await self.dispatch(invocation) for invocation in invocations]
