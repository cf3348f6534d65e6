"""Command parser for CLI input."""

import shlex

from cli.models import (
    CatCommand,
    CdCommand,
    CommandRequest,
    ListCommand,
    LocateCommand,
    MkdirCommand,
    MoveCommand,
    PutCommand,
    PwdCommand,
    RemoveCommand,
    StatCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    command_name = tokens[0]
    args = tokens[1:]

    if command_name == "stat":
        return StatCommand(path=_single_path(command_name, args))
    elif command_name == "ls":
        return ListCommand(path=args[0] if args else ".")
    elif command_name == "locate":
        return _parse_locate(args)
    elif command_name == "mkdir":
        return MkdirCommand(path=_single_path(command_name, args))
    elif command_name == "rm":
        return _parse_rm(args)
    elif command_name == "mv":
        return _parse_mv(args)
    elif command_name == "cat":
        return CatCommand(path=_single_path(command_name, args))
    elif command_name == "put":
        return _parse_put(args)
    elif command_name == "cd":
        return CdCommand(path=args[0] if args else "/")
    elif command_name == "pwd":
        if args:
            raise ParseError("pwd takes no arguments")
        return PwdCommand()
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _single_path(command_name: str, args: list[str]) -> str:
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: <path>")
    return args[0]


def _parse_locate(args: list[str]) -> LocateCommand:
    """Parse 'locate <path> [start length]' command."""
    if len(args) not in (1, 3):
        raise ParseError("locate requires <path> and optionally <start> <length>")

    if len(args) == 1:
        return LocateCommand(path=args[0])

    try:
        start, length = int(args[1]), int(args[2])
    except ValueError:
        raise ParseError("locate start and length must be integers")
    if start < 0 or length < 0:
        raise ParseError("locate start and length must be non-negative")

    return LocateCommand(path=args[0], start=start, length=length)


def _parse_rm(args: list[str]) -> RemoveCommand:
    """Parse 'rm [-r] <path>' command."""
    recursive = False
    if args and args[0] == "-r":
        recursive = True
        args = args[1:]
    if len(args) != 1:
        raise ParseError("rm requires exactly 1 path: rm [-r] <path>")
    return RemoveCommand(path=args[0], recursive=recursive)


def _parse_mv(args: list[str]) -> MoveCommand:
    """Parse 'mv <src> <dst>' command."""
    if len(args) != 2:
        raise ParseError("mv requires exactly 2 arguments: <src> <dst>")
    src, dst = args
    return MoveCommand(src=src, dst=dst)


def _parse_put(args: list[str]) -> PutCommand:
    """Parse 'put <local_path> <remote_path>' command."""
    if len(args) != 2:
        raise ParseError("put requires exactly 2 arguments: <local_path> <remote_path>")
    local_path, remote_path = args
    return PutCommand(local_path=local_path, remote_path=remote_path)
