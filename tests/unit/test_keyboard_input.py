"""Unit tests for the terminal input handlers."""

import pytest
from unittest.mock import Mock, patch

from readgrove.ui.keyboard_input import KeyboardInputHandler, SimpleInputHandler


@pytest.mark.unit
class TestKeyboardInputHandler:

    def test_failing_command_does_not_stop_input(self):
        def callback(key):
            if key == 'r':
                raise RuntimeError("engine exploded")
            return key != 'q'

        handler = KeyboardInputHandler(callback)
        handler.running = True
        with patch.object(handler, '_get_key', side_effect=['r', 'q']) as get_key:
            handler._input_loop()

        assert get_key.call_count == 2
        assert handler.running is False

    def test_key_read_error_is_logged_and_retried(self):
        callback = Mock(return_value=False)
        handler = KeyboardInputHandler(callback)
        handler.running = True
        with patch.object(handler, '_get_key', side_effect=[OSError("tty gone"), 'q']):
            handler._input_loop()

        callback.assert_called_once_with('q')

    def test_quit_key_ends_loop(self):
        callback = Mock(side_effect=lambda key: key != 'q')
        handler = KeyboardInputHandler(callback)
        handler.running = True
        with patch.object(handler, '_get_key', side_effect=[None, 'c', 'q']):
            handler._input_loop()

        assert [c.args[0] for c in callback.call_args_list] == ['c', 'q']


@pytest.mark.unit
class TestSimpleInputHandler:

    def test_failing_command_does_not_stop_input(self):
        seen = []

        def callback(key):
            seen.append(key)
            if key == 'r':
                raise RuntimeError("engine exploded")
            return key != 'q'

        handler = SimpleInputHandler(callback)
        handler.running = True
        with patch('builtins.input', side_effect=['read', '', 'quit']):
            handler._input_loop()

        assert seen == ['r', 'q']
        assert handler.running is False

    def test_end_of_input_quits(self):
        callback = Mock(return_value=False)
        handler = SimpleInputHandler(callback)
        handler.running = True
        with patch('builtins.input', side_effect=EOFError):
            handler._input_loop()

        callback.assert_called_once_with('q')
