"""Tests for the `config` command group."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from manifestlint.cli import cli


@pytest.mark.usefixtures("project_root")
class TestConfigValidate:
    def test_no_config_is_valid(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0
        assert "validate_config" in result.output

    def test_bad_rule_settings(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "manifestlint.toml").write_text(
            "[linters.settings.image-tags]\nnot-a-setting = true\n"
        )
        result = cli_runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 3
        assert "image-tags" in result.output

    def test_bad_expression(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "manifestlint.toml").write_text(
            "[[linters.custom]]\n"
            'name = "broken"\n'
            'kind = "jq"\n'
            "[[linters.custom.settings.rules]]\n"
            "expression = 'if then'\n"
            'message = "m"\n'
        )
        result = cli_runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 3
        assert "broken" in result.output

    def test_invalid_toml_exit_3(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "manifestlint.toml").write_text("[run\n")
        result = cli_runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 3
        assert "Invalid TOML" in result.output


@pytest.mark.usefixtures("project_root")
class TestConfigInit:
    def test_writes_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = cli_runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 0
        assert (tmp_path / "manifestlint.toml").is_file()

    def test_refuses_overwrite(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "manifestlint.toml").write_text("")
        result = cli_runner.invoke(cli, ["config", "init"])
        assert result.exit_code == 3
        assert "--force" in result.output

    def test_force(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "manifestlint.toml").write_text("")
        result = cli_runner.invoke(cli, ["config", "init", "--force"])
        assert result.exit_code == 0
        assert "[run]" in (tmp_path / "manifestlint.toml").read_text()

    def test_initialized_config_validates(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["config", "init"])
        result = cli_runner.invoke(cli, ["config", "validate"])
        assert result.exit_code == 0, result.output

    @pytest.mark.parametrize(
        ("args", "expected"),
        [
            (["config", "--examples"], "manifestlint config init"),
            (["config", "validate", "--examples"], "manifestlint config validate"),
            (["config", "init", "--examples"], "--force"),
        ],
    )
    def test_examples(self, cli_runner: CliRunner, args: list[str], expected: str) -> None:
        result = cli_runner.invoke(cli, args)
        assert result.exit_code == 0
        assert expected in result.output
