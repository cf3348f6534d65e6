"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True)
class StatCommand:
    """Show the overlay status of a path."""

    path: str
    command: Literal["stat"] = "stat"


@dataclass(frozen=True)
class ListCommand:
    """List the children of a directory."""

    path: str
    command: Literal["ls"] = "ls"


@dataclass(frozen=True)
class LocateCommand:
    """Show block locations of a file."""

    path: str
    start: int = 0
    length: int = 1
    command: Literal["locate"] = "locate"


@dataclass(frozen=True)
class MkdirCommand:
    """Create a directory."""

    path: str
    command: Literal["mkdir"] = "mkdir"


@dataclass(frozen=True)
class RemoveCommand:
    """Delete a file or directory."""

    path: str
    recursive: bool = False
    command: Literal["rm"] = "rm"


@dataclass(frozen=True)
class MoveCommand:
    """Rename a path."""

    src: str
    dst: str
    command: Literal["mv"] = "mv"


@dataclass(frozen=True)
class CatCommand:
    """Print the content of a file."""

    path: str
    command: Literal["cat"] = "cat"


@dataclass(frozen=True)
class PutCommand:
    """Upload a local file into the staging area."""

    local_path: str
    remote_path: str
    command: Literal["put"] = "put"


@dataclass(frozen=True)
class CdCommand:
    """Change the working directory."""

    path: str
    command: Literal["cd"] = "cd"


@dataclass(frozen=True)
class PwdCommand:
    """Print the working directory."""

    command: Literal["pwd"] = "pwd"


CommandRequest = (
    StatCommand
    | ListCommand
    | LocateCommand
    | MkdirCommand
    | RemoveCommand
    | MoveCommand
    | CatCommand
    | PutCommand
    | CdCommand
    | PwdCommand
)
