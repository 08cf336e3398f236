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

"""Unit tests for tool module."""

import pytest

from agentpress import CapabilityEntry, Dialect, InlineSchema, StructuredSchema, Tool


class TestGetCapabilities:
    """Tests for Tool.get_capabilities."""

    def test_both_dialects_for_one_method(self, search_tool_cls):
        capabilities = search_tool_cls.get_capabilities()

        assert set(capabilities) == {"web_search", "web-search"}
        assert capabilities["web_search"].dialect is Dialect.STRUCTURED
        assert capabilities["web-search"].dialect is Dialect.INLINE
        assert capabilities["web_search"].method == "search"
        assert capabilities["web-search"].method == "search"

    def test_entries(self, file_tool_cls):
        entry = file_tool_cls.get_capabilities()["read_file"]

        assert isinstance(entry, CapabilityEntry)
        assert entry.owner_tool_kind == "FileTool"
        assert entry.function_name == "read_file"
        assert entry.required == frozenset({"file_path"})

    def test_built_once(self, search_tool_cls):
        assert search_tool_cls.get_capabilities() is search_tool_cls.get_capabilities()

    def test_read_only(self, search_tool_cls):
        with pytest.raises(TypeError):
            search_tool_cls.get_capabilities()["new"] = None

    def test_no_declarations(self):
        class EmptyTool(Tool):
            pass

        assert dict(EmptyTool.get_capabilities()) == {}

    def test_missing_method(self):
        class MissingMethodTool(Tool):
            @classmethod
            def declare_capabilities(cls):
                return [("nope", StructuredSchema(name="nope", description=""))]

        with pytest.raises(ValueError, match="missing method"):
            MissingMethodTool.get_capabilities()

    def test_duplicate_function_name(self):
        class DuplicateTool(Tool):
            @classmethod
            def declare_capabilities(cls):
                return [
                    ("run", StructuredSchema(name="run", description="")),
                    ("run", StructuredSchema(name="run", description="again")),
                ]

            def run(self):
                pass

        with pytest.raises(ValueError, match="more than once"):
            DuplicateTool.get_capabilities()


class TestSchemaViews:
    """Tests for the per-dialect class views."""

    def test_structured_schemas(self, file_tool_cls):
        schemas = file_tool_cls.get_structured_schemas()
        assert set(schemas) == {"create_file", "read_file"}
        assert all(isinstance(s, StructuredSchema) for s in schemas.values())

    def test_inline_schemas(self, file_tool_cls):
        schemas = file_tool_cls.get_inline_schemas()
        assert set(schemas) == {"create-file"}
        assert isinstance(schemas["create-file"], InlineSchema)

    def test_inline_examples(self, shell_tool_cls):
        examples = shell_tool_cls.get_inline_examples()
        assert set(examples) == {"execute-command"}
        assert '<invoke name="execute-command">' in examples["execute-command"]


class TestToolHelpers:
    """Tests for Tool instance helpers."""

    def test_missing_parameters(self, file_tool_cls):
        tool = file_tool_cls()
        assert tool.missing_parameters("create_file", {"file_path": "a"}) == ["file_contents"]
        assert tool.missing_parameters("create_file", {"file_path": "a", "file_contents": ""}) == []

    def test_missing_parameters_unknown_function(self, file_tool_cls):
        assert file_tool_cls().missing_parameters("unknown", {}) == []

    def test_success_and_failure(self, file_tool_cls):
        tool = file_tool_cls()
        assert tool.success("ok").succeeded is True
        failed = tool.failure("bad", {"k": "v"})
        assert failed.succeeded is False
        assert failed.error_message == "bad"
        assert failed.metadata == {"k": "v"}
