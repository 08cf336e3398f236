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

from .dispatch import ToolDispatcher
from .exceptions import AgentPressError, InvokeBlockError, RegistrationError
from .parser import (
    InvokeParser,
    ParsedInvocation,
    ParseOutcome,
    coerce_parameter_value,
    extract_tool_names,
    parse_invocations,
    validate_invocation,
)
from .registry import RegistryStats, ToolRegistration, ToolRegistry
from .schema import (
    CapabilityEntry,
    CapabilitySchema,
    Dialect,
    InlineParameter,
    InlineSchema,
    StructuredSchema,
    ToolResult,
)
from .tool import Tool

__all__ = [
    # Schemas
    "CapabilityEntry",
    "CapabilitySchema",
    "Dialect",
    "InlineParameter",
    "InlineSchema",
    "StructuredSchema",
    "ToolResult",
    # Tools
    "Tool",
    # Registry
    "RegistryStats",
    "ToolRegistration",
    "ToolRegistry",
    # Parsing
    "InvokeParser",
    "ParsedInvocation",
    "ParseOutcome",
    "coerce_parameter_value",
    "extract_tool_names",
    "parse_invocations",
    "validate_invocation",
    # Dispatch
    "ToolDispatcher",
    # Exceptions
    "AgentPressError",
    "RegistrationError",
    "InvokeBlockError",
]
