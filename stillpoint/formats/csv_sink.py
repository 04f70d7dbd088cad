"""Comma-separated output of steady states."""

from __future__ import annotations

import csv
from collections.abc import Iterable, Sequence
from pathlib import Path
from types import TracebackType
from typing import IO

from stillpoint.core.types import State


class CsvSink:
    """
    Writes steady states as CSV rows under a header of species names.

    Rows are written as they are consumed, so a long enumeration can be
    followed on disk. Use as a context manager when the sink opens the file
    itself.

    Example:
        >>> with CsvSink.open("toggle_stable.csv", model.names) as sink:
        ...     sink.write_all(solve(model))
    """

    def __init__(self, stream: IO[str], species_names: Sequence[str], close: bool = False):
        self.species_names = list(species_names)
        self.rows_written = 0
        self._stream = stream
        self._close = close
        self._writer = csv.writer(stream, lineterminator="\n")
        self._writer.writerow(self.species_names)

    @classmethod
    def open(cls, path: str | Path, species_names: Sequence[str]) -> CsvSink:
        """Create the output file (and missing parent directories) and write the header."""
        output_path = Path(path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        stream = output_path.open("w", newline="", encoding="utf-8")
        return cls(stream, species_names, close=True)

    def write(self, state: State) -> None:
        """Write one steady state."""
        if len(state) != len(self.species_names):
            raise ValueError(
                f"State has {len(state)} levels but the header has "
                f"{len(self.species_names)} species"
            )
        self._writer.writerow(state)
        self.rows_written += 1

    def write_all(self, states: Iterable[State]) -> int:
        """Write every state of an iterable; returns the number written."""
        for state in states:
            self.write(state)
        return self.rows_written

    def close(self) -> None:
        self._stream.flush()
        if self._close:
            self._stream.close()

    def __enter__(self) -> CsvSink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def read_states(path: str | Path) -> tuple[list[str], list[State]]:
    """Read back a CSV written by ``CsvSink``: the header and the states."""
    with Path(path).open(newline="", encoding="utf-8") as stream:
        reader = csv.reader(stream)
        header = next(reader, [])
        states = [tuple(int(level) for level in row) for row in reader if row]
    return header, states
