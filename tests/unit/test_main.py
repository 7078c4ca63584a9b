"""Unit tests for command dispatch and logging setup."""

import logging

import pytest
from unittest.mock import Mock

from readgrove.config import ReadGroveConfig
from readgrove.main import ReadGroveApp, setup_logging


@pytest.fixture
def app():
    """ReadGroveApp with a mocked engine and no logging side effects."""
    app = ReadGroveApp.__new__(ReadGroveApp)
    app.should_exit = False
    app.engine = Mock()
    return app


@pytest.mark.unit
class TestHandleKey:

    @pytest.mark.parametrize("key,method", [
        ('c', 'start_calibration'),
        ('r', 'start_reading'),
        ('s', 'stop'),
        ('x', 'reset'),
        ('n', 'continue_to_new_session'),
    ])
    def test_keys_map_to_actions(self, app, key, method):
        assert app.handle_key(key) is True
        getattr(app.engine, method).assert_called_once_with()

    def test_quit(self, app):
        assert app.handle_key('q') is False
        assert app.should_exit is True

    def test_unknown_key_is_ignored(self, app):
        assert app.handle_key('z') is True
        assert app.engine.method_calls == []


@pytest.mark.unit
class TestSetupLogging:

    def test_writes_to_configured_file(self, tmp_path):
        config = ReadGroveConfig()
        log_file = tmp_path / "logs" / "readgrove.log"
        config.set('logging.file_path', str(log_file))
        config.set('logging.console_output', False)

        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            setup_logging(config, "DEBUG")
            logging.getLogger("readgrove.test").debug("hello from test")
            for handler in root.handlers:
                handler.flush()

            assert log_file.exists()
            assert "hello from test" in log_file.read_text()
            assert root.level == logging.DEBUG
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
