"""Console log of the build being reported on."""

from collections.abc import Iterable
from typing import TextIO

DEFAULT_LABEL = "Gitea Checks"


class BuildLogger:
    """Writes ``[label] message`` lines to the build console."""

    def __init__(self, stream: TextIO, label: str = DEFAULT_LABEL) -> None:
        """Initialize logger writing to ``stream``."""
        self.stream = stream
        self.label = label

    def log(self, message: str) -> None:
        """Write one message, one console line per message line."""
        for line in message.splitlines() or [""]:
            self.stream.write(f"[{self.label}] {line}\n")
        self.stream.flush()

    def log_each_line(self, lines: Iterable[str]) -> None:
        """Write each entry as its own message."""
        for line in lines:
            self.log(line)
