"""Tests for the command line interface."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from gitguide import __version__
from gitguide.config import get_token, set_token
from gitguide.main import cli
from gitguide.model import ModelError

README = "# demo\n\n## Installation\nnpm install\n\n## Usage\nnpm run dev\n"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def mock_ollama():
    with patch("gitguide.main.OllamaClient") as cls:
        client = cls.return_value
        client.model = "qwen2.5-coder:7b"
        client.generate.return_value = README
        yield client


class TestGenerate:
    def test_writes_readme(self, runner, mock_ollama, sample_next_repo):
        result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo)])
        assert result.exit_code == 0, result.output
        assert (sample_next_repo / "README.md").read_text(encoding="utf-8") == README
        assert "Installation, Usage" in result.output
        mock_ollama.ensure_ready.assert_called_once()

    def test_gen_alias_and_output_name(self, runner, mock_ollama, sample_next_repo):
        result = runner.invoke(cli, ["gen", "-d", str(sample_next_repo), "-o", "DOCS.md"])
        assert result.exit_code == 0, result.output
        assert (sample_next_repo / "DOCS.md").exists()

    def test_existing_output_declined(self, runner, mock_ollama, sample_next_repo):
        (sample_next_repo / "README.md").write_text("keep me")
        result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo)], input="n\n")
        assert result.exit_code == 0
        assert "cancelled" in result.output
        assert (sample_next_repo / "README.md").read_text() == "keep me"
        mock_ollama.generate.assert_not_called()

    def test_existing_output_forced(self, runner, mock_ollama, sample_next_repo):
        (sample_next_repo / "README.md").write_text("old")
        result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo), "--force"])
        assert result.exit_code == 0, result.output
        assert (sample_next_repo / "README.md").read_text(encoding="utf-8") == README

    def test_unwritable_output_is_reported(self, runner, mock_ollama, sample_next_repo):
        (sample_next_repo / "docs").mkdir()
        result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo), "-o", "docs", "--force"])
        assert result.exit_code == 1
        assert "Cannot write" in result.output
        assert result.exception is None or isinstance(result.exception, SystemExit)

    def test_missing_directory(self, runner, mock_ollama, tmp_path):
        result = runner.invoke(cli, ["generate", "-d", str(tmp_path / "missing")])
        assert result.exit_code != 0
        assert "Directory not found" in result.output

    def test_model_error_is_reported(self, runner, mock_ollama, sample_next_repo):
        mock_ollama.ensure_ready.side_effect = ModelError("Cannot connect to Ollama. Is it running? Try: ollama serve")
        result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo)])
        assert result.exit_code == 1
        assert "Cannot connect to Ollama" in result.output
        assert not (sample_next_repo / "README.md").exists()

    def test_model_from_config(self, runner, sample_next_repo):
        from gitguide.config import Config, save_config

        save_config(Config(model="llama3"))
        with patch("gitguide.main.OllamaClient") as cls:
            cls.return_value.generate.return_value = README
            result = runner.invoke(cli, ["generate", "-d", str(sample_next_repo)])
        assert result.exit_code == 0, result.output
        cls.assert_called_once_with(model="llama3")

    def test_remote_repository(self, runner, mock_ollama, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        with patch("gitguide.main.analyze_repository") as remote, \
                patch("gitguide.main.ReadmeGenerator") as generator:
            generator.return_value.generate.return_value.content = README
            generator.return_value.generate.return_value.sections = ["Usage"]
            result = runner.invoke(cli, ["generate", "--repo", "https://github.com/octo/demo"])
        assert result.exit_code == 0, result.output
        remote.assert_called_once_with("https://github.com/octo/demo", token=None)
        assert (tmp_path / "README.md").read_text(encoding="utf-8") == README

    def test_invalid_repository_url(self, runner, mock_ollama, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(cli, ["generate", "--repo", "https://github.com/nope"])
        assert result.exit_code == 1
        assert "Invalid GitHub repository URL" in result.output


class TestAnalyze:
    def test_json_output(self, runner, sample_next_repo):
        result = runner.invoke(cli, ["analyze", str(sample_next_repo), "--json"])
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["name"] == "demo"
        assert data["language"] == "JavaScript/Next.js"
        assert data["structure"]["files"] == 2
        assert data["files"][0]["path"] == "package.json"

    def test_table_output(self, runner, sample_next_repo):
        result = runner.invoke(cli, ["analyze", str(sample_next_repo)])
        assert result.exit_code == 0, result.output
        assert "demo" in result.output
        assert "JavaScript/Next.js" in result.output

    def test_missing_directory(self, runner, tmp_path):
        result = runner.invoke(cli, ["analyze", str(tmp_path / "missing")])
        assert result.exit_code == 1
        assert "Directory not found" in result.output


class TestConfigCommand:
    def test_saves_token(self, runner):
        token = "ghp_" + "x" * 36
        result = runner.invoke(cli, ["config"], input=f"{token}\n")
        assert result.exit_code == 0, result.output
        assert get_token() == token

    def test_rejects_short_token(self, runner):
        token = "ghp_" + "y" * 36
        result = runner.invoke(cli, ["config"], input=f"short\n{token}\n")
        assert result.exit_code == 0, result.output
        assert "too short" in result.output
        assert get_token() == token

    def test_keeps_existing_token(self, runner):
        set_token("ghp_existing_token_12345678")
        result = runner.invoke(cli, ["config"], input="n\n")
        assert result.exit_code == 0
        assert "unchanged" in result.output
        assert get_token() == "ghp_existing_token_12345678"

    def test_clear(self, runner):
        set_token("ghp_existing_token_12345678")
        result = runner.invoke(cli, ["config", "--clear"])
        assert result.exit_code == 0
        assert get_token() is None


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert __version__ in result.output
