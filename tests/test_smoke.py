from schemascout import __version__
from click.testing import CliRunner

from schemascout.cli.main import cli


def test_version():
    assert __version__ == "0.1.0"


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "find, classify and validate" in result.output


def test_public_imports():
    from schemascout.discovery import ProjectScanner, classify_unknown_schema
    from schemascout.validation import Validator

    assert ProjectScanner and Validator and classify_unknown_schema
