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

"""Capability schemas and the tool result envelope.

A capability is described in one of two dialects:

- Structured: a JSON-Schema-like function description for native
  function-calling interfaces.
- Inline: a tag-based description of the pseudo-XML convention the model
  writes into free-form text::

    <function_calls>
    <invoke name="web-search">
    <parameter name="query">cats</parameter>
    </invoke>
    </function_calls>
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from strands.types.tools import ToolSpec


class Dialect(str, Enum):
    """Schema dialect of a capability."""

    STRUCTURED = "structured"
    INLINE = "inline"


@dataclass(frozen=True, slots=True)
class StructuredSchema:
    """Function-calling description of a capability.

    Attributes:
        name: Function name advertised to the model.
        description: Human-readable description (shown to the model).
        properties: JSON Schema property specs keyed by parameter name.
        required: Names of parameters that must be present.
    """

    name: str
    description: str
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    required: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        # Accept any iterable of names for `required`
        object.__setattr__(self, "required", frozenset(self.required))

    @property
    def function_name(self) -> str:
        return self.name

    @property
    def dialect(self) -> Dialect:
        return Dialect.STRUCTURED

    def parameters_schema(self) -> dict[str, Any]:
        """Return the `parameters` JSON Schema object."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": dict(self.properties),
        }
        if self.required:
            schema["required"] = sorted(self.required)
        return schema

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters_schema(),
        }

    def to_openai_schema(self) -> dict[str, Any]:
        """Export in OpenAI function calling format.

        Returns::

            {
                "type": "function",
                "function": { "name": ..., "description": ..., "parameters": ... }
            }
        """
        return {"type": "function", "function": self.to_dict()}

    def to_tool_spec(self) -> ToolSpec:
        """Export as a strands `ToolSpec` so the schema can be handed to a strands model."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": {"json": self.parameters_schema()},
        }


@dataclass(frozen=True, slots=True)
class InlineParameter:
    """One parameter block of an inline invocation."""

    name: str
    type: str = "string"
    description: str = ""
    required: bool = False


@dataclass(frozen=True, slots=True)
class InlineSchema:
    """Tag-based description of a capability.

    Attributes:
        tag: Value of the invoke block's `name` attribute.
        description: Human-readable description (shown to the model).
        parameters: Parameter blocks, in the order they should be written.
        example: Usage example shown to the model. When empty, one is
            rendered from `parameters` (see `usage_example`).
    """

    tag: str
    description: str
    parameters: tuple[InlineParameter, ...] = ()
    example: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "parameters", tuple(self.parameters))

    @property
    def function_name(self) -> str:
        return self.tag

    @property
    def dialect(self) -> Dialect:
        return Dialect.INLINE

    @property
    def required(self) -> frozenset[str]:
        return frozenset(p.name for p in self.parameters if p.required)

    @property
    def usage_example(self) -> str:
        """Declared example, or one rendered in the default inline grammar."""
        if self.example:
            return self.example
        lines = ["<function_calls>", f'<invoke name="{self.tag}">']
        for param in self.parameters:
            lines.append(f'<parameter name="{param.name}">{param.description or param.type}</parameter>')
        lines += ["</invoke>", "</function_calls>"]
        return "\n".join(lines)


CapabilitySchema = Union[StructuredSchema, InlineSchema]


@dataclass(frozen=True, slots=True)
class CapabilityEntry:
    """A registered capability of a tool type.

    Attributes:
        owner_tool_kind: Name of the tool class declaring the capability.
        function_name: Structured function name or inline tag.
        dialect: Dialect of `schema`.
        schema: The capability schema.
        method: Name of the tool method that executes the capability.
    """

    owner_tool_kind: str
    function_name: str
    dialect: Dialect
    schema: CapabilitySchema
    method: str

    @property
    def required(self) -> frozenset[str]:
        return self.schema.required


@dataclass(frozen=True, slots=True)
class ToolResult:
    """Result envelope returned by every capability execution.

    Exactly one of `output` / `error_message` is meaningful, selected by
    `succeeded`.
    """

    succeeded: bool
    output: Any = None
    error_message: str | None = None
    metadata: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        if self.succeeded and self.error_message is not None:
            raise ValueError("successful ToolResult cannot carry an error_message")
        if not self.succeeded and not self.error_message:
            raise ValueError("failed ToolResult requires an error_message")

    @classmethod
    def success(cls, output: Any = None, metadata: dict[str, Any] | None = None) -> ToolResult:
        return cls(succeeded=True, output=output, metadata=metadata)

    @classmethod
    def failure(cls, message: str, metadata: dict[str, Any] | None = None) -> ToolResult:
        return cls(succeeded=False, error_message=message, metadata=metadata)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.succeeded}
        if self.succeeded:
            result["output"] = self.output
        else:
            result["error"] = self.error_message
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result
