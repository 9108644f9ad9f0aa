"""Tests for the chat/graph bridge."""

from unittest.mock import patch

import pytest
import requests

from governance.chat import FeedbackType, GuidelinesChat, GuidelinesClient, QueryResponse
from governance.chat.bridge import ERROR_TEXT, NO_ANSWER_TEXT, WELCOME_TEXT
from governance.graph import EdgeState, KnowledgeGraph, Node, NodeType


@pytest.fixture
def chat(client, surface, privacy_graph) -> GuidelinesChat:
    """Chat session over the privacy graph."""
    return GuidelinesChat(client, surface=surface, graph=privacy_graph)


class TestInitialState:
    """Tests for a fresh session."""

    def test_welcome_message(self, chat):
        assert len(chat.messages) == 1
        welcome = chat.messages[0]
        assert welcome.id == 1
        assert welcome.sender == "ai"
        assert welcome.text == WELCOME_TEXT

    def test_graph_drawn_neutral(self, chat):
        assert set(chat.surface.positions()) == {"privacy", "pii", "gdpr"}
        assert chat.projection.highlight == frozenset()
        assert chat.latest_highlight == frozenset()

    def test_click_wired_to_draft(self, chat):
        chat.surface.click("pii")
        assert chat.draft.startswith("Tell me about PII Detection")


class TestSend:
    """Tests for the question/answer flow."""

    def test_blank_input_ignored(self, chat, client):
        assert chat.send("   ") is None
        assert chat.send("") is None
        client.query.assert_not_called()
        assert len(chat.messages) == 1

    def test_answer_with_highlight(self, chat, client):
        client.query.return_value = QueryResponse(
            answer="Privacy covers PII.", highlighted_nodes=["privacy", "pii"]
        )
        message = chat.send("What does privacy cover?")

        assert [m.sender for m in chat.messages] == ["ai", "user", "ai"]
        assert message.text == "Privacy covers PII."
        assert message.highlighted_nodes == ["privacy", "pii"]
        assert chat.highlight == frozenset({"privacy", "pii"})
        assert chat.projection.edges_in(EdgeState.ACTIVE) == ["e1"]
        assert chat.latest_highlight == frozenset({"privacy", "pii"})
        assert chat.searching is False

    def test_history_excludes_welcome_and_current_question(self, chat, client):
        client.query.return_value = QueryResponse(answer="First answer")
        chat.send("First question")
        chat.send("Second question")

        question, history = client.query.call_args.args
        assert question == "Second question"
        assert [(t.role, t.content) for t in history] == [
            ("user", "First question"),
            ("assistant", "First answer"),
        ]

    def test_first_question_has_empty_history(self, chat, client):
        chat.send("Hi")
        assert client.query.call_args.args[1] == []

    def test_highlight_reset_before_answer(self, chat, client):
        chat.set_highlight({"gdpr"})
        seen = []

        def _query(question, history):
            seen.append(chat.projection.highlight)
            seen.append(chat.searching)
            return QueryResponse(answer="ok")

        client.query.side_effect = _query
        chat.send("Anything?")
        assert seen == [frozenset(), True]

    def test_answer_without_highlight_stays_neutral(self, chat, client):
        chat.set_highlight({"gdpr"})
        chat.send("No nodes please")
        assert chat.highlight == frozenset()

    def test_empty_answer(self, chat, client):
        client.query.return_value = QueryResponse()
        assert chat.send("?").text == NO_ANSWER_TEXT

    def test_backend_error(self, chat, client):
        chat.set_highlight({"gdpr"})
        client.query.side_effect = requests.ConnectionError("refused")
        message = chat.send("Will this fail?")

        assert message.text == ERROR_TEXT
        assert message.sender == "ai"
        assert chat.highlight == frozenset()
        assert chat.searching is False

    def test_draft_cleared(self, chat):
        chat.draft = "typed"
        chat.send("typed")
        assert chat.draft == ""

    def test_message_ids_sequential(self, chat):
        chat.send("one")
        chat.send("two")
        assert [m.id for m in chat.messages] == [1, 2, 3, 4, 5]


class TestNodeQuestion:
    """Tests for turning a clicked node into a draft question."""

    def test_with_type(self, chat):
        question = chat.node_question("privacy")
        assert question == "Tell me about Privacy policy"
        assert chat.draft == question

    def test_with_description(self, client, surface):
        graph = KnowledgeGraph(
            nodes=[Node(id="bias", label="Bias", type=NodeType.PRODUCT_TYPE, description="Unfair outcomes")]
        )
        chat = GuidelinesChat(client, surface=surface, graph=graph)
        assert chat.node_question("bias") == (
            'Tell me about Bias producttype. The description says: "Unfair outcomes"'
        )

    def test_untyped_node(self, client, surface):
        graph = KnowledgeGraph(nodes=[Node(id="misc")])
        chat = GuidelinesChat(client, surface=surface, graph=graph)
        assert chat.node_question("misc") == "Tell me about misc"

    def test_not_submitted(self, chat, client):
        chat.node_question("pii")
        client.query.assert_not_called()
        assert len(chat.messages) == 1


class TestFeedback:
    """Tests for feedback submission."""

    def test_submits(self, chat, client):
        assert chat.submit_feedback(3, "unclear", "confusing") is True
        client.send_feedback.assert_called_once_with(3, FeedbackType.UNCLEAR, "confusing")

    def test_type_required(self, chat, client):
        with pytest.raises(ValueError):
            chat.submit_feedback(3, "")
        client.send_feedback.assert_not_called()

    def test_invalid_type(self, chat):
        with pytest.raises(ValueError):
            chat.submit_feedback(3, "rude")

    def test_failure_returns_false(self, chat, client):
        client.send_feedback.side_effect = requests.HTTPError("500")
        assert chat.submit_feedback(3, FeedbackType.OUTDATED) is False


class TestLoadGraph:
    """Tests for replacing the seed graph with the backend graph."""

    def test_loads_backend_graph(self, chat, client):
        client.fetch_graph.return_value = KnowledgeGraph(
            nodes=[Node(id="ethics", type=NodeType.CATEGORY), Node(id="bias")]
        )
        assert chat.load_graph() is True
        assert set(chat.surface.positions()) == {"ethics", "bias"}

    def test_keeps_graph_on_error(self, chat, client, privacy_graph):
        client.fetch_graph.side_effect = requests.Timeout("slow")
        assert chat.load_graph() is False
        assert chat.graph is privacy_graph

    def test_keeps_graph_on_non_object_payload(self, surface, privacy_graph):
        client = GuidelinesClient("http://api.test")
        chat = GuidelinesChat(client, surface=surface, graph=privacy_graph)
        with patch.object(client, "_get", return_value=[]):
            assert chat.load_graph() is False
        assert chat.graph is privacy_graph

    def test_tolerates_malformed_node_data(self, surface, privacy_graph):
        client = GuidelinesClient("http://api.test")
        chat = GuidelinesChat(client, surface=surface, graph=privacy_graph)
        with patch.object(client, "_get", return_value={"nodes": [{"id": "a", "data": "oops"}]}):
            assert chat.load_graph() is True
        assert [n.id for n in chat.graph.nodes] == ["a"]

    def test_keeps_graph_when_empty(self, chat, client, privacy_graph):
        client.fetch_graph.return_value = KnowledgeGraph()
        assert chat.load_graph() is False
        assert chat.graph is privacy_graph

    def test_default_graph_is_seed(self, client, surface):
        chat = GuidelinesChat(client, surface=surface)
        assert len(chat.graph.nodes) == 7
