"""Custom completer for the calculator CLI."""

from typing import Iterable, Sequence

from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from cli.constants import COMMANDS


class CalculatorCompleter(Completer):
    """
    Custom completer that provides:
    - Command name completion for the first token
    - Server id completion for the 'select' command
    """

    def __init__(self, server_ids: Sequence[int] = ()):
        self.server_ids = [str(server_id) for server_id in server_ids]

    def get_completions(
        self, document: Document, complete_event
    ) -> Iterable[Completion]:
        """
        Generate completions based on cursor position and context.

        For the first token, completes command names.
        For the first 'select' argument, completes server ids not yet listed.
        """
        text = document.text_before_cursor
        tokens = text.split()

        is_typing_new_token = text.endswith(" ") or not tokens

        if not tokens or (len(tokens) == 1 and not is_typing_new_token):
            yield from self._complete_commands(tokens[0] if tokens else "")
            return

        if tokens[0].lower() != "select":
            return

        argument_index = len(tokens) - 1 if not is_typing_new_token else len(tokens)
        if argument_index != 1:
            return

        current_word = "" if is_typing_new_token else tokens[-1]
        yield from self._complete_server_ids(current_word)

    def _complete_commands(self, partial: str) -> Iterable[Completion]:
        """Complete command names matching the partial input."""
        partial_lower = partial.lower()
        for cmd in COMMANDS:
            if cmd.startswith(partial_lower):
                yield Completion(cmd, start_position=-len(partial))

    def _complete_server_ids(self, partial: str) -> Iterable[Completion]:
        """
        Complete the next id of a comma-separated selection such as '1,'.
        Ids already present in the selection are skipped.
        """
        prefix, _, last = partial.rpartition(",")
        chosen = set(prefix.split(",")) if prefix else set()
        for server_id in self.server_ids:
            if server_id in chosen or not server_id.startswith(last):
                continue
            yield Completion(server_id, start_position=-len(last))
