"""
Read-print loop for malt.

The line source hands the reader one line at a time. A reader error is
reported and the loop moves on to the next line; only the line source can
end the session (interrupt/EOF -> status 0, I/O failure -> status 1).
"""

from __future__ import annotations

import logging
import readline
import sys
from pathlib import Path
from typing import Callable, Optional, TextIO

from malt import config
from malt.errors import MaltSyntaxError, NestingTooDeep, ReadFailure, ReadInterrupt
from malt.reader.parser import read_str
from malt.types.values import Value

logger = logging.getLogger(__name__)


class LineReader:
    """Prompted line input with readline history and no terminal bell."""

    def __init__(
        self,
        prompt: str | None = None,
        history_file: Optional[Path] = None,
        input_fn: Callable[[str], str] = input,
    ):
        self.prompt = prompt if prompt is not None else config.get_prompt()
        self.history_file = history_file
        self.input_fn = input_fn
        self.hlen = 0

    def start(self) -> None:
        readline.parse_and_bind("set bell-style none")
        if self.history_file is None:
            return
        try:
            readline.read_history_file(self.history_file)
            self.hlen = readline.get_current_history_length()
        except FileNotFoundError:
            try:
                open(self.history_file, 'wb').close()
            except OSError as e:
                raise ReadFailure(f"Cannot create history file {self.history_file}: {e}") from e
            self.hlen = 0
        except OSError as e:
            raise ReadFailure(f"Cannot read history file {self.history_file}: {e}") from e

    def read_line(self) -> str:
        try:
            line = self.input_fn(self.prompt)
        except (EOFError, KeyboardInterrupt):
            # Ctrl+D or Ctrl+C
            raise ReadInterrupt() from None
        except OSError as e:
            raise ReadFailure(str(e)) from e

        self._save_history()
        return line

    def _save_history(self) -> None:
        # input() adds non-empty lines to readline's history; persist the new ones
        if self.history_file is None:
            return
        nhlen = readline.get_current_history_length()
        if nhlen <= self.hlen:
            return
        try:
            readline.append_history_file(nhlen - self.hlen, self.history_file)
        except OSError as e:
            raise ReadFailure(f"Cannot write history file {self.history_file}: {e}") from e
        self.hlen = nhlen


def evaluate(form: Value) -> Value:
    """No evaluator yet: forms come back exactly as read."""
    return form


def rep(line: str) -> list[str]:
    """Read, evaluate and print every form on one line."""
    forms = [evaluate(form) for form in read_str(line)]
    try:
        return [str(form) for form in forms]
    except RecursionError:
        # Printing takes more stack per level than reading
        raise NestingTooDeep("Form nested too deeply to print") from None


def repl(line_reader: LineReader | None = None, out: TextIO | None = None) -> int:
    """Run the loop until the line source ends it; return the exit status."""
    if line_reader is None:
        line_reader = LineReader(history_file=config.get_history_file())
    if out is None:
        out = sys.stdout

    try:
        line_reader.start()
        while True:
            line = line_reader.read_line()
            try:
                for text in rep(line):
                    print(text, file=out)
            except MaltSyntaxError as e:
                logger.debug("reader error on %r: %s", line, e)
                print(f"error: {e}", file=out)
    except ReadInterrupt:
        logger.debug("session ended by interrupt")
        return 0
    except ReadFailure as e:
        logger.error("line source failed: %s", e)
        print(f"Error reading stdin: {e}", file=out)
        return 1


def main() -> int:
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return repl()
