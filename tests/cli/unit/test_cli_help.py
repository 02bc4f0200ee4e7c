"""CLI smoke tests."""

from click.testing import CliRunner
from xso_normalizer.cli import cli


def test_cli_displays_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "normalize" in result.output
    assert "generate-config" in result.output
    assert "init-document" in result.output


def test_normalize_help_lists_its_inputs() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["normalize", "--help"])

    assert result.exit_code == 0
    for option in ("--input", "--dictionary", "--config", "--output"):
        assert option in result.output
