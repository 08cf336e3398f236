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

"""Parser for inline tool invocations embedded in model output.

Format:
    <function_calls>
    <invoke name="function_name">
    <parameter name="param1">value1</parameter>
    <parameter name="param2">value2</parameter>
    </invoke>
    </function_calls>

A container holds zero or more invoke blocks; an invoke block holds zero or
more parameter blocks. Tag names are case-sensitive and configurable.

Failures are collected, never raised: a malformed invoke block becomes an
entry in `ParseOutcome.errors` and parsing continues with its siblings. An
invoke block ends at its closing tag or at the next invoke opening tag,
whichever comes first, so an unclosed block cannot swallow the block that
follows it.

Parameter values are coerced in a fixed order (see `coerce_parameter_value`).
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Any, NamedTuple

from .exceptions import InvokeBlockError

logger = logging.getLogger(__name__)

# Longest raw excerpt quoted in an error message
ERROR_SNIPPET_LENGTH = 80

_NAME_ATTRIBUTE = re.compile(r"""(?:^|\s)name\s*=\s*(?:"([^"]*)"|'([^']*)')""")
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_RADIX_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+")


@dataclass(frozen=True, slots=True)
class ParsedInvocation:
    """A parsed invocation request.

    In the inline dialect the tool name and the function name are the same
    value: the invoke block's `name` attribute.
    """

    name: str
    parameters: dict[str, Any] = field(default_factory=dict)
    raw: str = ""

    @property
    def tool_name(self) -> str:
        return self.name

    @property
    def function_name(self) -> str:
        return self.name

    @property
    def payload(self) -> str:
        """JSON-encoded parameters."""
        return json.dumps(self.parameters)


@dataclass(frozen=True, slots=True)
class ParseOutcome:
    """Result of parsing one block of model output.

    Attributes:
        ok: False if any invoke block failed to parse.
        invocations: Parsed invocations in document order.
        errors: One message per malformed invoke block.
        leftover_text: Input with every container block removed, trimmed.
    """

    ok: bool = True
    invocations: list[ParsedInvocation] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    leftover_text: str = ""


class _Block(NamedTuple):
    attributes: str
    body: str | None  # None when the closing tag is missing
    raw: str


def coerce_parameter_value(raw: str) -> Any:
    """Convert a raw parameter value to a typed value.

    The trimmed text is tried, in order, as:

    1. A JSON document (numbers, booleans, null, arrays, objects, quoted strings).
    2. `true` / `false`, case-insensitive.
    3. A finite numeric literal (e.g. `+5`, `.5`, `007`, `0x1F`).
    4. The trimmed text itself.
    """
    value = raw.strip()

    try:
        return json.loads(value, parse_float=_parse_finite_float, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        pass

    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    try:
        if _RADIX_PATTERN.fullmatch(value):
            return int(value, 0)
        if _DECIMAL_PATTERN.fullmatch(value):
            if not any(c in value for c in ".eE"):
                return int(value)
            number = float(value)
            if math.isfinite(number):
                return number
    except ValueError:
        # Integer strings beyond the interpreter's digit limit stay text
        pass

    return value


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON
    raise ValueError(f"non-finite constant {name}")


def _parse_finite_float(text: str) -> float:
    number = float(text)
    if not math.isfinite(number):
        raise ValueError(f"non-finite number {text}")
    return number


def validate_invocation(invocation: ParsedInvocation) -> bool:
    """Check that an invocation has a name, a parameter mapping and its raw source."""
    return bool(invocation.name) and isinstance(invocation.parameters, dict) and bool(invocation.raw)


class InvokeParser:
    """Extracts inline invocations from free-form text.

    Stateless after construction; a single instance can be shared between
    threads.

    Example:
        >>> parser = InvokeParser()
        >>> outcome = parser.parse(
        ...     'Searching now. <function_calls><invoke name="web-search">'
        ...     '<parameter name="query">cats</parameter></invoke></function_calls>'
        ... )
        >>> outcome.invocations[0].parameters
        {'query': 'cats'}
        >>> outcome.leftover_text
        'Searching now.'

    Attributes:
        container_tag: Tag enclosing a group of invoke blocks.
        invoke_tag: Tag of one invocation; carries the `name` attribute.
        parameter_tag: Tag of one parameter; carries the `name` attribute.
    """

    DEFAULT_CONTAINER_TAG = "function_calls"
    DEFAULT_INVOKE_TAG = "invoke"
    DEFAULT_PARAMETER_TAG = "parameter"

    def __init__(
        self,
        container_tag: str = DEFAULT_CONTAINER_TAG,
        invoke_tag: str = DEFAULT_INVOKE_TAG,
        parameter_tag: str = DEFAULT_PARAMETER_TAG,
    ) -> None:
        """Initialize the parser with optional custom tag names.

        Args:
            container_tag: Outer container tag name.
            invoke_tag: Invoke block tag name.
            parameter_tag: Parameter block tag name.
        """
        self.container_tag = container_tag
        self.invoke_tag = invoke_tag
        self.parameter_tag = parameter_tag

        self._container_pattern = re.compile(
            rf"<{re.escape(container_tag)}>(.*?)</{re.escape(container_tag)}>",
            re.DOTALL,
        )
        self._invoke_open = re.compile(rf"<{re.escape(invoke_tag)}(?=[\s>])([^>]*)>")
        self._invoke_close = f"</{invoke_tag}>"
        self._parameter_open = re.compile(rf"<{re.escape(parameter_tag)}(?=[\s>])([^>]*)>")
        self._parameter_close = f"</{parameter_tag}>"

    def parse(self, text: str) -> ParseOutcome:
        """Parse every invocation in `text`.

        Args:
            text: Model output text.

        Returns:
            Parsed invocations, per-block errors and the text outside any
            container block.
        """
        containers = list(self._container_pattern.finditer(text))
        if not containers:
            return ParseOutcome(ok=True, invocations=[], errors=[], leftover_text=text)

        invocations: list[ParsedInvocation] = []
        errors: list[str] = []

        for container in containers:
            for block in self._split_blocks(container.group(1), self._invoke_open, self._invoke_close):
                try:
                    invocations.append(self._parse_invoke(block))
                except InvokeBlockError as e:
                    message = self._format_error(e)
                    logger.warning(f"Invoke block parse error: {message}")
                    errors.append(message)

        return ParseOutcome(
            ok=not errors,
            invocations=invocations,
            errors=errors,
            leftover_text=self._container_pattern.sub("", text).strip(),
        )

    def extract_tool_names(self, text: str) -> list[str]:
        """Names of closed invoke blocks anywhere in `text`, deduplicated in first-seen order.

        Container blocks are not required.
        """
        names: list[str] = []
        for block in self._split_blocks(text, self._invoke_open, self._invoke_close):
            name = _name_attribute(block.attributes)
            if block.body is not None and name and name not in names:
                names.append(name)
        return names

    def _parse_invoke(self, block: _Block) -> ParsedInvocation:
        name = _name_attribute(block.attributes)
        if name is None:
            raise InvokeBlockError("missing name attribute", snippet=block.raw)
        if not name:
            raise InvokeBlockError("empty name attribute", snippet=block.raw)
        if block.body is None:
            raise InvokeBlockError(f"missing closing {self._invoke_close} tag", name=name, snippet=block.raw)

        parameters: dict[str, Any] = {}
        for param in self._split_blocks(block.body, self._parameter_open, self._parameter_close):
            param_name = _name_attribute(param.attributes)
            if not param_name:
                raise InvokeBlockError(f"{self.parameter_tag} block without a name", name=name, snippet=param.raw)
            if param.body is None:
                raise InvokeBlockError(
                    f"{self.parameter_tag} {param_name!r} is missing its closing {self._parameter_close} tag",
                    name=name,
                    snippet=param.raw,
                )
            parameters[param_name] = coerce_parameter_value(param.body)

        return ParsedInvocation(name=name, parameters=parameters, raw=block.raw)

    @staticmethod
    def _split_blocks(content: str, open_pattern: re.Pattern[str], close_tag: str) -> list[_Block]:
        """Split `content` into blocks starting at each opening tag.

        A block's body runs to the first closing tag before the next opening
        tag; without one, the body is None and the raw text runs up to the
        next opening tag.
        """
        openings = list(open_pattern.finditer(content))
        blocks: list[_Block] = []
        for i, opening in enumerate(openings):
            limit = openings[i + 1].start() if i + 1 < len(openings) else len(content)
            close = content.find(close_tag, opening.end(), limit)
            if close == -1:
                blocks.append(_Block(opening.group(1), None, content[opening.start() : limit].rstrip()))
            else:
                end = close + len(close_tag)
                blocks.append(_Block(opening.group(1), content[opening.end() : close], content[opening.start() : end]))
        return blocks

    @staticmethod
    def _format_error(error: InvokeBlockError) -> str:
        if error.name:
            return f"Failed to parse invoke block {error.name!r}: {error}"
        snippet = error.snippet
        if len(snippet) > ERROR_SNIPPET_LENGTH:
            snippet = snippet[:ERROR_SNIPPET_LENGTH] + "..."
        return f"Failed to parse invoke block {snippet!r}: {error}"


def _name_attribute(attributes: str) -> str | None:
    """Value of the `name` attribute (stripped), or None if absent."""
    match = _NAME_ATTRIBUTE.search(attributes)
    if not match:
        return None
    value = match.group(1) if match.group(1) is not None else match.group(2)
    return value.strip()


_DEFAULT_PARSER = InvokeParser()


def parse_invocations(text: str) -> ParseOutcome:
    """Parse `text` with the default tag names."""
    return _DEFAULT_PARSER.parse(text)


def extract_tool_names(text: str) -> list[str]:
    """Extract invoke block names from `text` with the default tag names."""
    return _DEFAULT_PARSER.extract_tool_names(text)
