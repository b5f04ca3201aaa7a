"""
Tests for the command line interface.

Run with: pytest tests/test_cli.py -v
"""

import pytest
from click.testing import CliRunner
from rich.console import Console

import cli as cli_module
from lawsearch.models import FinalText
from lawsearch.server import Settings, dependencies
from conftest import ScriptedChatModel


@pytest.fixture
def runner(monkeypatch):
    # Wide console so table cells are not wrapped
    monkeypatch.setattr(cli_module, "console", Console(width=200))
    return CliRunner()


@pytest.fixture
def chat_setup(monkeypatch):
    """Point the chat command at a scripted model instead of Gemini."""
    settings = Settings(_env_file=None, gemini_api_key="test-key")
    model = ScriptedChatModel([FinalText("減価償却は取得原価を配分する手続です。")])
    build_services = dependencies.build_services

    monkeypatch.setattr("lawsearch.server.config.get_settings", lambda: settings)
    monkeypatch.setattr(
        "lawsearch.server.dependencies.build_services",
        lambda settings, store=None: build_services(settings, store=store, chat_model=model),
    )
    return model


class TestSearchCommand:

    def test_search_shows_citation(self, runner, corpus_file):
        result = runner.invoke(cli_module.cli, ["search", "減価償却", "--corpus", str(corpus_file)])

        assert result.exit_code == 0
        assert "企業会計原則 第三 貸借対照表原則 5" in result.output

    def test_no_results(self, runner, corpus_file):
        result = runner.invoke(cli_module.cli, ["search", "存在しない語", "--corpus", str(corpus_file)])

        assert result.exit_code == 0
        assert "No results found" in result.output

    def test_missing_corpus(self, runner, tmp_path):
        result = runner.invoke(cli_module.cli, ["laws", "--corpus", str(tmp_path / "none.json")])

        assert result.exit_code == 1
        assert "Could not load corpus" in result.output


class TestChatCommand:

    def test_answers_then_exits_on_end_of_input(self, runner, corpus_file, chat_setup):
        """Ctrl-D (end of input) ends the session cleanly."""
        result = runner.invoke(
            cli_module.cli,
            ["chat", "--corpus", str(corpus_file)],
            input="減価償却とは\n",
        )

        assert result.exit_code == 0, result.output
        assert "取得原価を配分する" in result.output
        assert "Goodbye!" in result.output
        assert len(chat_setup.calls) == 1

    def test_quit_command(self, runner, corpus_file, chat_setup):
        result = runner.invoke(cli_module.cli, ["chat", "--corpus", str(corpus_file)], input="quit\n")

        assert result.exit_code == 0
        assert chat_setup.calls == []
