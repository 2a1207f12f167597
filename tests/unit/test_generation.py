"""Dynamic generation pipeline tests."""

import asyncio
import json
from unittest.mock import MagicMock

import pytest

from viewkit.core.config import Settings
from viewkit.generation import (
    SYNTHETIC_DATA_INSTRUCTION,
    DataSource,
    GeminiGenerator,
    GenerationFailedError,
    GenerationPipeline,
    InvalidJSONResponseError,
    InvalidTreeResponseError,
    MissingCredentialError,
    StaticDataProvider,
    build_user_message,
    fetch_data,
    get_view_generation_prompt,
    resolve_data_sources,
)
from viewkit.tree import validate

TREE = {
    "root": "page",
    "elements": {
        "page": {"key": "page", "type": "PageHeader", "props": {"title": "Pipeline"}, "children": ["m1", "board"]},
        "m1": {"key": "m1", "type": "MetricCard", "props": {"label": "Open deals", "value": "2"}},
        "board": {
            "key": "board",
            "type": "KanbanBoard",
            "props": {"columns": [{"id": "open", "title": "Open", "cards": []}], "moveTool": "update_opportunity"},
        },
    },
}


class FakeGenerator:
    """Scripted collaborator."""

    def __init__(self, reply=None, error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate(self, system, user_message):
        self.calls.append((system, user_message))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


def pipeline(settings, metrics, generator, provider=None):
    return GenerationPipeline(settings, generator=generator, provider=provider, metrics=metrics)


@pytest.mark.unit
class TestPipeline:
    """End-to-end generation with a scripted collaborator."""

    @pytest.mark.asyncio
    async def test_fenced_reply_round_trip(self, settings, metrics):
        generator = FakeGenerator("```json\n" + json.dumps(TREE) + "\n```")

        tree = await pipeline(settings, metrics, generator).generate("Show my pipeline")

        assert tree.root == "page"
        assert tree.node_count <= settings.max_tree_nodes
        assert validate(tree) == []
        assert metrics.registry.get_sample_value("viewkit_generation_requests_total", {"status": "success"}) == 1.0

    @pytest.mark.asyncio
    async def test_system_prompt_carries_constraints(self, settings, metrics):
        generator = FakeGenerator(json.dumps(TREE))

        await pipeline(settings, metrics, generator).generate("Show my pipeline")

        system, _ = generator.calls[0]
        assert "KanbanBoard" in system
        assert f"{settings.max_tree_nodes}" in system

    @pytest.mark.asyncio
    async def test_missing_credential(self, metrics):
        with pytest.raises(MissingCredentialError) as exc_info:
            await GenerationPipeline(Settings(gemini_api_key=""), metrics=metrics).generate("Show contacts")

        assert exc_info.value.category == "missing_credential"
        assert (
            metrics.registry.get_sample_value(
                "viewkit_generation_requests_total", {"status": "missing_credential"}
            )
            == 1.0
        )

    @pytest.mark.asyncio
    async def test_transport_failure(self, settings, metrics):
        generator = FakeGenerator(error=ConnectionError("reset by peer"))

        with pytest.raises(GenerationFailedError) as exc_info:
            await pipeline(settings, metrics, generator).generate("Show contacts")

        assert exc_info.value.category == "generation_failed"
        assert "reset by peer" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_timeout(self, metrics):
        generator = FakeGenerator(json.dumps(TREE), delay=1.0)

        with pytest.raises(GenerationFailedError):
            await pipeline(Settings(generation_timeout=0.05), metrics, generator).generate("Show contacts")

    @pytest.mark.asyncio
    async def test_non_text_reply(self, settings, metrics):
        with pytest.raises(GenerationFailedError):
            await pipeline(settings, metrics, FakeGenerator(None)).generate("Show contacts")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        ["Here is your view!", '{"root": "page", "elements": {', "[1, 2, 3]", "```json\n```"],
    )
    async def test_invalid_json(self, settings, metrics, reply):
        with pytest.raises(InvalidJSONResponseError) as exc_info:
            await pipeline(settings, metrics, FakeGenerator(reply)).generate("Show contacts")

        assert exc_info.value.category == "invalid_json"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "reply",
        [{"elements": {}}, {"root": "page", "elements": {"page": "not a node"}}, {"root": 3, "elements": []}],
    )
    async def test_invalid_tree(self, settings, metrics, reply):
        with pytest.raises(InvalidTreeResponseError) as exc_info:
            await pipeline(settings, metrics, FakeGenerator(json.dumps(reply))).generate("Show contacts")

        assert exc_info.value.category == "invalid_tree"

    @pytest.mark.asyncio
    async def test_oversized_reply(self, metrics):
        reply = json.dumps({**TREE, "padding": "x" * 2048})

        with pytest.raises(InvalidTreeResponseError):
            await pipeline(Settings(max_response_size=1024), metrics, FakeGenerator(reply)).generate("Show contacts")

    @pytest.mark.asyncio
    async def test_structural_issues_are_not_fatal(self, settings, metrics):
        broken = {"root": "page", "elements": {"page": {"key": "page", "type": "Card", "children": ["ghost"]}}}

        tree = await pipeline(settings, metrics, FakeGenerator(json.dumps(broken))).generate("Show contacts")

        assert [i.code.value for i in validate(tree)] == ["dangling_child"]
        assert metrics.registry.get_sample_value("viewkit_tree_issues_total", {"code": "dangling_child"}) == 1.0

    @pytest.mark.asyncio
    async def test_malformed_node_fields_are_not_fatal(self, settings, metrics):
        reply = {
            "root": "page",
            "elements": {
                "page": {"key": "page", "type": "Section", "children": ["m1", 7, "m2"]},
                "m1": {"key": "m1", "type": "MetricCard", "props": None},
                "m2": {"key": "m2", "type": None},
            },
        }

        tree = await pipeline(settings, metrics, FakeGenerator(json.dumps(reply))).generate("Show contacts")

        assert tree.elements["page"].child_ids == ["m1", "m2"]
        assert tree.elements["m1"].props == {}
        assert [(i.node_id, i.code.value) for i in validate(tree)] == [("m2", "empty_type")]


@pytest.mark.unit
class TestDataGrounding:
    """Fetched data reaches the collaborator verbatim."""

    @pytest.mark.asyncio
    async def test_without_data_asks_for_synthetic(self, settings, metrics):
        generator = FakeGenerator(json.dumps(TREE))

        await pipeline(settings, metrics, generator).generate("Show my pipeline")

        _, user_message = generator.calls[0]
        assert user_message.startswith("REQUEST:\nShow my pipeline")
        assert SYNTHETIC_DATA_INSTRUCTION in user_message

    @pytest.mark.asyncio
    async def test_data_is_passed_verbatim(self, settings, metrics):
        records = [{"id": "opp_1", "name": "Acme renewal", "monetaryValue": 12500.5}]
        provider = StaticDataProvider({"opportunities": records})
        generator = FakeGenerator(json.dumps(TREE))

        await pipeline(settings, metrics, generator, provider).generate("Show my deals")

        _, user_message = generator.calls[0]
        assert SYNTHETIC_DATA_INSTRUCTION not in user_message
        payload = json.loads(user_message.split("DATA (use exactly as given):\n", 1)[1])
        assert payload == {"opportunities": records}


@pytest.mark.unit
class TestDataSources:
    """Source resolution and fetching."""

    @pytest.mark.parametrize(
        "prompt,expected",
        [
            ("Show my deals", [DataSource.PIPELINES, DataSource.OPPORTUNITIES]),
            ("Leads from last week", [DataSource.CONTACTS]),
            ("Unpaid invoices and contacts", [DataSource.CONTACTS, DataSource.INVOICES]),
            ("Tomorrow's schedule", [DataSource.CALENDARS, DataSource.APPOINTMENTS]),
            ("Hello there", []),
        ],
    )
    def test_keywords(self, prompt, expected):
        assert resolve_data_sources(prompt) == expected

    def test_hint_wins(self):
        assert resolve_data_sources("Show my deals", "invoices, contact") == [
            DataSource.INVOICES,
            DataSource.CONTACTS,
        ]

    def test_blank_hint_ignored(self):
        assert resolve_data_sources("Show contacts", "  ") == [DataSource.CONTACTS]

    @pytest.mark.asyncio
    async def test_fetch_skips_failures_and_empty(self):
        class Provider:
            async def fetch(self, source):
                if source == DataSource.PIPELINES:
                    raise RuntimeError("CRM down")
                if source == DataSource.CONTACTS:
                    return []
                return [{"id": 1}]

        data = await fetch_data(Provider(), [DataSource.PIPELINES, DataSource.OPPORTUNITIES, DataSource.CONTACTS])

        assert data == {"opportunities": [{"id": 1}]}

    @pytest.mark.asyncio
    async def test_fetch_without_provider(self):
        assert await fetch_data(None, [DataSource.CONTACTS]) == {}


@pytest.mark.unit
class TestPrompt:
    """Prompt text."""

    def test_system_prompt_limits(self):
        text = get_view_generation_prompt(12, 6)

        assert "12" in text
        assert "6" in text
        assert "=== COMPONENT CATALOG ===" in text

    def test_user_message_is_deterministic(self):
        data = {"contacts": [{"b": 1, "a": 2}]}

        assert build_user_message("x", data) == build_user_message("x", dict(data))


@pytest.mark.unit
class TestGeminiGenerator:
    """Gemini wrapper with the client library patched out."""

    def test_requires_key(self):
        with pytest.raises(MissingCredentialError):
            GeminiGenerator(Settings(gemini_api_key=""))

    @pytest.mark.asyncio
    async def test_generate(self, monkeypatch, settings):
        genai = MagicMock()
        genai.GenerativeModel.return_value.generate_content.return_value.text = json.dumps(TREE)
        monkeypatch.setattr("viewkit.generation.gemini.genai", genai)

        reply = await GeminiGenerator(settings).generate("system", "REQUEST:\nx")

        assert json.loads(reply) == TREE
        genai.configure.assert_called_once_with(api_key="test-api-key")
        kwargs = genai.GenerativeModel.call_args.kwargs
        assert kwargs["system_instruction"] == "system"

    def test_invoke_wraps_errors(self, monkeypatch, settings):
        genai = MagicMock()
        genai.GenerativeModel.return_value.generate_content.side_effect = RuntimeError("quota")
        monkeypatch.setattr("viewkit.generation.gemini.genai", genai)

        with pytest.raises(GenerationFailedError):
            GeminiGenerator(settings).invoke("system", "user")
