"""
Tests for AI Tools Blueprint

Tests cover:
- POST /api/aitools/ajax endpoint
- POST /api/aitools/process_prompt endpoint
- GET /api/aitools/prompts endpoint
- Response envelope and error handling
- Health endpoint and CLI commands
"""

from unittest.mock import MagicMock, patch

import pytest

from aitools.ai import AIToolsService, MockAIClient, get_tools_service


class TestAjaxEndpoint:
    """Tests for POST /api/aitools/ajax."""

    def test_params_with_leading_action(self, client):
        response = client.post(
            "/api/aitools/ajax",
            json={"params": ["process_prompt", "aiassist.summarize", "Some text", {"is_html": False}]},
        )

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is True
        assert data["result"] == "Mock response"
        assert data["usage"]["total_tokens"] == 30

    def test_action_and_params(self, client):
        response = client.post(
            "/api/aitools/ajax",
            json={"action": "process_prompt", "params": ["aiassist.formal", "hey there"]},
        )

        data = response.get_json()
        assert data["success"] is True
        request = get_tools_service().ai_client.call_history[0]["request"]
        assert "hey there" in request.messages[1].content

    def test_named_fields(self, client):
        response = client.post(
            "/api/aitools/ajax",
            json={"action": "process_prompt", "prompt_id": "aiassist.concise", "content": "x"},
        )

        assert response.get_json()["success"] is True

    def test_unknown_action_is_escaped(self, client):
        response = client.post("/api/aitools/ajax", json={"action": "<img src=x>"})

        assert response.status_code == 200
        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "Unknown action: &lt;img src=x&gt;"

    def test_requires_json_body(self, client):
        response = client.post("/api/aitools/ajax", data="not json")

        data = response.get_json()
        assert data["success"] is False
        assert "JSON body required" in data["error"]


class TestProcessPromptEndpoint:
    """Tests for POST /api/aitools/process_prompt."""

    def test_success_envelope(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.summarize", "content": "Long text"},
        )

        data = response.get_json()
        assert data == {
            "success": True,
            "result": "Mock response",
            "usage": {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
        }

    def test_requires_prompt_id(self, client):
        response = client.post("/api/aitools/process_prompt", json={"content": "text"})

        data = response.get_json()
        assert response.status_code == 200
        assert data == {"success": False, "error": "Valid prompt ID is required"}

    def test_requires_string_content(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.summarize", "content": 42},
        )

        assert response.get_json() == {"success": False, "error": "Valid content is required"}

    def test_unknown_prompt(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.<b>", "content": "text"},
        )

        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "Unknown prompt ID: aiassist.&lt;b&gt;"

    def test_top_level_is_html_flag(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.grammar", "content": "<p>x</p>", "is_html": True},
        )

        assert response.get_json()["success"] is True
        request = get_tools_service().ai_client.call_history[0]["request"]
        assert "HTML or markup" in request.messages[1].content

    def test_preferred_translation_languages(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={
                "prompt_id": "aiassist.translate-ja",
                "content": "Hello",
                "translation_languages": ["ja"],
            },
        )

        assert response.get_json()["success"] is True

    def test_translation_outside_preferences(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.translate-ja", "content": "Hello"},
        )

        data = response.get_json()
        assert data["success"] is False
        assert "Unknown prompt ID" in data["error"]

    def test_accept_language_sets_ui_language(self, client):
        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.translate-nl", "content": "Hello"},
            headers={"Accept-Language": "nl"},
        )

        assert response.get_json()["success"] is True

    def test_service_error_message(self, app, client):
        app.config["AI_API_KEY"] = ""

        response = client.post(
            "/api/aitools/process_prompt",
            json={"prompt_id": "aiassist.summarize", "content": "text"},
        )

        data = response.get_json()
        assert data["success"] is False
        assert "AI API not configured" in data["error"]

    def test_unexpected_error_is_generic(self, client):
        with patch.object(
            AIToolsService, "process_prompt", side_effect=RuntimeError("secret internals")
        ):
            response = client.post(
                "/api/aitools/process_prompt",
                json={"prompt_id": "aiassist.summarize", "content": "text"},
            )

        data = response.get_json()
        assert data["success"] is False
        assert data["error"] == "An error occurred processing your request"

    def test_source_lang_is_returned(self, client):
        with patch("aitools.ai.deepl_client.requests.request") as mock_request, patch.dict(
            get_tools_service().config, {"DEEPL_API_KEY": "key:fx"}
        ):
            resp = MagicMock()
            resp.status_code = 200
            resp.json.return_value = {
                "translations": [{"detected_source_language": "DE", "text": "<p>Hello</p>"}]
            }
            mock_request.return_value = resp

            response = client.post(
                "/api/aitools/process_prompt",
                json={"prompt_id": "aiassist.translate-en", "content": "Hallo"},
            )

        data = response.get_json()
        assert data["success"] is True
        assert data["result"] == "Hello"
        assert data["source_lang"] == "de"


class TestPromptsEndpoint:
    """Tests for GET /api/aitools/prompts."""

    def test_textarea_menu(self, client):
        response = client.get("/api/aitools/prompts")

        data = response.get_json()
        assert data["success"] is True
        assert data["widget"] == "textarea"
        assert [item["id"] for item in data["prompts"]][0] == "aiassist.summarize"

    def test_htmlarea_menu_uses_language(self, client):
        response = client.get("/api/aitools/prompts?widget=htmlarea&lang=de")

        data = response.get_json()
        translate = next(item for item in data["prompts"] if item.get("label") == "Translate")
        assert [item["id"] for item in translate["items"]] == [
            "aiassist.translate-de",
            "aiassist.translate-en",
            "aiassist.translate-fr",
            "aiassist.translate-it",
        ]
        assert translate["items"][0]["loading_message"] == "Translating to German..."


class TestHealth:
    """Tests for the health endpoint."""

    def test_health(self, client):
        response = client.get("/health")

        data = response.get_json()
        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert data["config_errors"] == []


class TestCliCommands:
    """Tests for the administrator CLI commands."""

    @pytest.fixture
    def runner(self, app):
        return app.test_cli_runner()

    @patch("aitools.ai.client.requests.get")
    def test_connection_ok(self, mock_get, runner):
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = {"data": [{"id": "gpt-4o-mini"}]}
        mock_get.return_value = resp

        result = runner.invoke(args=["aitools-test-connection"])

        assert result.exit_code == 0
        assert "Connection OK: https://api.openai.com/v1 offers model gpt-4o-mini" in result.output

    @patch("aitools.ai.client.requests.get")
    def test_connection_failure(self, mock_get, runner):
        resp = MagicMock()
        resp.status_code = 401
        resp.text = "unauthorized"
        mock_get.return_value = resp

        result = runner.invoke(args=["aitools-test-connection"])

        assert result.exit_code == 1
        assert "Connection test failed: HTTP 401" in result.output

    def test_deepl_languages_without_key(self, runner):
        result = runner.invoke(args=["aitools-deepl-languages"])

        assert result.exit_code == 1
        assert "DeepL check failed" in result.output

    @patch("aitools.ai.deepl_client.requests.request")
    def test_deepl_languages(self, mock_request, app, runner):
        app.config["DEEPL_API_KEY"] = "key:fx"
        resp = MagicMock()
        resp.status_code = 200
        resp.json.return_value = [{"language": "DE", "name": "German"}]
        mock_request.return_value = resp

        result = runner.invoke(args=["aitools-deepl-languages"])

        assert result.exit_code == 0
        assert "DE\tGerman" in result.output


def test_testing_mode_uses_mock_client(app):
    assert isinstance(get_tools_service().ai_client, MockAIClient)
    assert app.extensions["aitools_service"] is get_tools_service()
