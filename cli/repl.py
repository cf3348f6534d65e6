"""REPL with prompt_toolkit for user interaction."""

import os
import sys
from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from cli.commands import (
    handle_cat,
    handle_cd,
    handle_list,
    handle_locate,
    handle_mkdir,
    handle_move,
    handle_put,
    handle_pwd,
    handle_remove,
    handle_stat,
)
from cli.completer import OverlayCompleter
from cli.constants import (
    HELP_TEXT,
    PROMPT_TEXT,
    STYLE,
    WELCOME_HELP,
    WELCOME_TITLE,
)
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
from common.logging_config import get_logger
from overlay.exceptions import OverlayException

logger = get_logger(__name__)

HANDLERS = {
    StatCommand: handle_stat,
    ListCommand: handle_list,
    LocateCommand: handle_locate,
    MkdirCommand: handle_mkdir,
    RemoveCommand: handle_remove,
    MoveCommand: handle_move,
    CatCommand: handle_cat,
    PutCommand: handle_put,
    CdCommand: handle_cd,
    PwdCommand: handle_pwd,
}


def clear_screen() -> None:
    """Clear the terminal screen (cross-platform)."""
    if sys.platform == "win32":
        os.system("cls")
    else:
        os.system("clear")


def show_welcome() -> None:
    print(WELCOME_TITLE)
    print(WELCOME_HELP)


def dispatch_command(cmd_obj, fs=None) -> str:
    """Dispatch parsed command to appropriate handler."""
    handler = HANDLERS.get(type(cmd_obj))
    if handler is None:
        return f"Unknown command type: {type(cmd_obj)}"
    return handler(cmd_obj, fs)


def run_once(command_line: str, fs=None) -> int:
    """
    Parse and run one command line, printing its result.

    Returns:
        Exit status: 0 on success, 1 if the command failed, 2 on a syntax error
    """
    if command_line.strip() == "help":
        print(HELP_TEXT)
        return 0

    try:
        result = dispatch_command(parse_command(command_line), fs)
    except ParseError as e:
        print(f"Error: {e}")
        return 2
    except (OverlayException, ValueError) as e:
        logger.error(f"Command failed: {e}")
        print(f"Error: {e}")
        return 1

    print(result)
    return 1 if result.startswith("Error:") else 0


def repl_loop() -> None:
    """Start interactive REPL with prompt_toolkit."""
    session: PromptSession = PromptSession(
        completer=OverlayCompleter(), history=InMemoryHistory(), style=STYLE
    )

    clear_screen()
    show_welcome()

    while True:
        try:
            user_input = session.prompt([("class:prompt", PROMPT_TEXT)]).strip()
        except KeyboardInterrupt:
            continue
        except EOFError:
            print("\nGoodbye!")
            break

        if not user_input:
            continue
        if user_input == "exit":
            print("Goodbye!")
            break
        if user_input == "clear":
            clear_screen()
            show_welcome()
            continue

        try:
            run_once(user_input)
        except KeyboardInterrupt:
            print("Interrupted")
