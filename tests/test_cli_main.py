"""Tests for CLI argument handling."""

import pytest

from cli.main import _split_options


def test_no_arguments_starts_repl():
    assert _split_options([]) == (False, None, [])


def test_debug_and_uri_are_removed_from_command():
    debug, uri, command = _split_options(['--debug', '--uri', 'tachyon://r:1', 'stat', '/data/a.csv'])

    assert debug
    assert uri == 'tachyon://r:1'
    assert command == ['stat', '/data/a.csv']


def test_uri_with_equals_sign():
    assert _split_options(['--uri=tachyon://r:1', 'pwd']) == (False, 'tachyon://r:1', ['pwd'])


def test_uri_without_value_exits():
    with pytest.raises(SystemExit):
        _split_options(['--uri'])
