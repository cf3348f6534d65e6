"""Custom completer for the overlay CLI."""

from pathlib import Path
from typing import Iterable

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class OverlayCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Local file completion for the source argument of 'put'
    """

    def __init__(self, base_dir: Path | None = None):
        self.base_dir = base_dir

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "put":
            return

        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_local_files(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_local_files(self, partial: str) -> Iterable[Completion]:
        """Complete names of regular files in the directory the partial path points into."""
        base_dir = self.base_dir or Path.cwd()
        directory, _, prefix = partial.rpartition('/')
        if partial.startswith('/'):
            search_dir = Path(directory or '/')
        else:
            search_dir = base_dir / directory if directory else base_dir

        if not search_dir.is_dir():
            return

        for item in sorted(search_dir.iterdir(), key=lambda p: p.name):
            if not item.is_file() or not item.name.startswith(prefix):
                continue
            candidate = f"{directory}/{item.name}" if directory or partial.startswith('/') else item.name
            yield Completion(candidate, start_position=-len(partial))
