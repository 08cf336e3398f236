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

"""Root pytest configuration for agentpress tests.

Test Structure:
    tests/unit/        - Unit tests (no external dependencies)

Running Tests:
    pytest tests/

The sample tools below stand in for real tool implementations (file, shell,
search, ...). Tests receive the classes through fixtures.
"""

import pytest
from typing_extensions import override

from agentpress import InlineParameter, InlineSchema, StructuredSchema, Tool, ToolRegistry, ToolResult


class SearchTool(Tool):
    """Exposes one method under both dialects."""

    def __init__(self, api_key: str = "") -> None:
        self.api_key = api_key

    @classmethod
    @override
    def declare_capabilities(cls):
        return [
            (
                "search",
                StructuredSchema(
                    name="web_search",
                    description="Search the web for information",
                    properties={
                        "query": {"type": "string", "description": "Search query"},
                        "num_results": {"type": "number", "description": "Number of results"},
                    },
                    required={"query"},
                ),
            ),
            (
                "search",
                InlineSchema(
                    tag="web-search",
                    description="Search the web for information",
                    parameters=(
                        InlineParameter("query", "string", "Search query", required=True),
                        InlineParameter("num_results", "number", "Number of results"),
                    ),
                ),
            ),
        ]

    async def search(self, query: str, num_results: int = 10) -> ToolResult:
        return self.success(f"results for {query}", {"num_results": num_results})


class FileTool(Tool):
    """Synchronous methods, one of them structured-only."""

    def __init__(self) -> None:
        self.files: dict[str, str] = {}

    @classmethod
    @override
    def declare_capabilities(cls):
        return [
            (
                "create_file",
                StructuredSchema(
                    name="create_file",
                    description="Create a file",
                    properties={
                        "file_path": {"type": "string"},
                        "file_contents": {"type": "string"},
                    },
                    required=["file_path", "file_contents"],
                ),
            ),
            (
                "create_file",
                InlineSchema(
                    tag="create-file",
                    description="Create a file",
                    parameters=(
                        InlineParameter("file_path", required=True),
                        InlineParameter("file_contents", required=True),
                    ),
                    example='<function_calls>\n<invoke name="create-file">\n'
                    '<parameter name="file_path">notes.txt</parameter>\n'
                    '<parameter name="file_contents">hello</parameter>\n'
                    "</invoke>\n</function_calls>",
                ),
            ),
            (
                "read_file",
                StructuredSchema(
                    name="read_file",
                    description="Read a file",
                    properties={"file_path": {"type": "string"}},
                    required=["file_path"],
                ),
            ),
        ]

    def create_file(self, file_path: str, file_contents: str) -> ToolResult:
        self.files[file_path] = file_contents
        return self.success(f"created {file_path}")

    def read_file(self, file_path: str) -> ToolResult:
        if file_path not in self.files:
            return self.failure(f"File not found: {file_path}")
        return self.success(self.files[file_path])


class ShellTool(Tool):
    """Inline-only tool whose method returns a bare value."""

    @classmethod
    @override
    def declare_capabilities(cls):
        return [
            (
                "execute",
                InlineSchema(
                    tag="execute-command",
                    description="Run a shell command",
                    parameters=(InlineParameter("command", required=True),),
                ),
            ),
        ]

    def execute(self, command: str) -> str:
        if command == "boom":
            raise RuntimeError("sandbox unavailable")
        return f"ran {command}"


@pytest.fixture
def search_tool_cls():
    return SearchTool


@pytest.fixture
def file_tool_cls():
    return FileTool


@pytest.fixture
def shell_tool_cls():
    return ShellTool


@pytest.fixture
def registry():
    """Registry holding SearchTool, FileTool and ShellTool."""
    registry = ToolRegistry()
    registry.register(SearchTool, api_key="secret")
    registry.register(FileTool)
    registry.register(ShellTool)
    return registry
