"""Unit tests for the main CLI application."""

import logging

from dustpan import __version__
from dustpan.cli.main import app, configure_logging
from rich.logging import RichHandler
from typer.testing import CliRunner

runner = CliRunner()


class TestMainApp:
    """Tests for global options."""

    def test_version(self) -> None:
        """--version prints the version and exits."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"dustpan version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help lists every command group."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for name in ("junk", "dupes", "large", "size", "history", "config"):
            assert name in result.stdout

    def test_no_args_shows_help(self) -> None:
        """Running without arguments prints usage."""
        result = runner.invoke(app, [])
        assert "Usage" in result.output


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_levels(self) -> None:
        """Verbose and quiet select DEBUG and ERROR."""
        root = logging.getLogger()
        original = root.level
        try:
            configure_logging(verbose=True)
            assert root.level == logging.DEBUG
            configure_logging(quiet=True)
            assert root.level == logging.ERROR
            configure_logging()
            assert root.level == logging.WARNING
        finally:
            root.setLevel(original)

    def test_single_handler(self) -> None:
        """Repeated calls install one Rich handler."""
        configure_logging()
        configure_logging()
        handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        assert len(handlers) == 1
