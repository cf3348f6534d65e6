"""Tests for CLI command parsing."""

import pytest

from cli.models import (
    CatCommand,
    CdCommand,
    ListCommand,
    LocateCommand,
    MkdirCommand,
    MoveCommand,
    PutCommand,
    PwdCommand,
    RemoveCommand,
    StatCommand,
)
from cli.parser import ParseError, parse_command


@pytest.mark.parametrize("line,expected", [
    ("stat /data/a.csv", StatCommand(path="/data/a.csv")),
    ("ls", ListCommand(path=".")),
    ("ls /data", ListCommand(path="/data")),
    ("locate /data/a.csv%42", LocateCommand(path="/data/a.csv%42")),
    ("locate /data/a.csv 10 20", LocateCommand(path="/data/a.csv", start=10, length=20)),
    ("mkdir /data/new", MkdirCommand(path="/data/new")),
    ("rm /tmp/staging/x", RemoveCommand(path="/tmp/staging/x")),
    ("rm -r /tmp/staging", RemoveCommand(path="/tmp/staging", recursive=True)),
    ("mv /a /b", MoveCommand(src="/a", dst="/b")),
    ("cat /data/a.csv", CatCommand(path="/data/a.csv")),
    ("put ./part-00000 /tmp/staging/part-00000", PutCommand("./part-00000", "/tmp/staging/part-00000")),
    ("cd", CdCommand(path="/")),
    ("cd data", CdCommand(path="data")),
    ("pwd", PwdCommand()),
])
def test_parse_valid_commands(line, expected):
    assert parse_command(line) == expected


def test_quoted_paths_keep_spaces():
    assert parse_command('stat "/data/my file.csv"') == StatCommand(path="/data/my file.csv")


@pytest.mark.parametrize("line", [
    "",
    "   ",
    "frobnicate /x",
    "stat",
    "stat /a /b",
    "locate /a 1",
    "locate /a x 1",
    "locate /a -1 1",
    "rm",
    "rm -r",
    "mv /a",
    "put onlyone",
    "pwd extra",
    'stat "/unterminated',
])
def test_parse_invalid_commands(line):
    with pytest.raises(ParseError):
        parse_command(line)


def test_unknown_command_message():
    with pytest.raises(ParseError) as exc_info:
        parse_command("frobnicate")
    assert "Unknown command" in str(exc_info.value)
