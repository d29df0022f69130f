"""
Unit tests for configuration parsing and the entry point
"""

import logging
from unittest.mock import patch

import pytest

from ptlk.app import DEFAULT_API_URL, AppConfig, main, parse_args, setup_logging


class TestParseArgs:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("POTLUCK_API_URL", raising=False)
        config = parse_args([])
        assert config == AppConfig(
            api_url=DEFAULT_API_URL,
            limit=50,
            debug=False,
            log_file="ptlk.log",
        )

    def test_env_api_url(self, monkeypatch):
        monkeypatch.setenv("POTLUCK_API_URL", "http://localhost:3000")
        assert parse_args([]).api_url == "http://localhost:3000"

    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("POTLUCK_API_URL", "http://localhost:3000")
        config = parse_args(["--api-url", "http://example.org", "-l", "5", "-d"])
        assert config.api_url == "http://example.org"
        assert config.limit == 5
        assert config.debug

    @pytest.mark.parametrize("argv", [["--limit", "0"], ["--api-url", "  "]])
    def test_invalid_values(self, argv):
        with pytest.raises(ValueError):
            parse_args(argv)


class TestMain:
    def test_configuration_error_exits_2(self, capsys):
        with patch("ptlk.app.load_dotenv"):
            assert main(["--limit", "-1"]) == 2
        assert "Configuration error" in capsys.readouterr().out

    def test_keyboard_interrupt_exits_cleanly(self):
        with patch("ptlk.app.load_dotenv"), patch("ptlk.app.setup_logging"), \
                patch("ptlk.app.run", side_effect=KeyboardInterrupt):
            assert main([]) == 0

    def test_requires_terminal(self, capsys):
        with patch("ptlk.app.load_dotenv"), patch("ptlk.app.setup_logging"), \
                patch("ptlk.app.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            assert main([]) == 2
        assert "interactive terminal" in capsys.readouterr().out


def test_debug_logging_goes_to_file(tmp_path):
    log_file = tmp_path / "ptlk.log"
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    root.handlers = []
    try:
        setup_logging(AppConfig(api_url="x", limit=1, debug=True, log_file=str(log_file)))
        logging.getLogger("ptlk.test").debug("hello from test")
        for handler in root.handlers:
            handler.flush()
        assert "hello from test" in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers, level = saved
        root.setLevel(level)
