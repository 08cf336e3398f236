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

"""Custom exceptions for agentpress.

Registration errors are raised to the caller of `ToolRegistry.register`.
Invoke block errors never escape the parser; they are converted into
strings in `ParseOutcome.errors`.
"""


class AgentPressError(Exception):
    """Base exception for all agentpress errors."""


class RegistrationError(AgentPressError):
    """A tool could not be constructed or its capabilities could not be read."""

    def __init__(self, message: str, *, tool_kind: str):
        super().__init__(message)
        self.tool_kind = tool_kind


class InvokeBlockError(AgentPressError):
    """A single invoke block is malformed."""

    def __init__(self, message: str, *, name: str | None = None, snippet: str = ""):
        super().__init__(message)
        self.name = name
        self.snippet = snippet
