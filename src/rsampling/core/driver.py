from __future__ import annotations

import queue
import signal
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, TextIO

import typer

from ..config import SampleConfig
from .reservoir import Reservoir


class DriverState(str, Enum):
    READING = "reading"
    INTERRUPTED = "interrupted"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


@dataclass(frozen=True)
class DriverResult:
    state: DriverState
    seen: int
    emitted: int
    peeks: int


def normalize_record(line: str, strip: bool = True) -> str:
    if strip:
        return line.strip()
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def iter_records(source: Iterable[str], strip: bool = True) -> Iterator[str]:
    # A final line without a trailing newline is still a complete record.
    for raw_line in source:
        yield normalize_record(raw_line, strip=strip)


def write_sample(records: list[str], sink: TextIO | None = None) -> int:
    for record in records:
        # color=True keeps escape sequences in records intact on non-tty sinks.
        typer.echo(record, file=sink, color=True)
    return len(records)


class SampleDriver:
    def __init__(
        self,
        reservoir: Reservoir,
        sink: TextIO | None = None,
        on_interrupt: str = "peek",
        strip: bool = True,
    ) -> None:
        self.reservoir = reservoir
        self.sink = sink
        self.on_interrupt = on_interrupt
        self.strip = strip
        self.state = DriverState.READING
        self.peeks = 0
        self._sink_lock = threading.Lock()
        # SimpleQueue.put is reentrant, so it is safe to call from a signal handler.
        self._requests: queue.SimpleQueue[bool | None] = queue.SimpleQueue()
        self._printer: threading.Thread | None = None

    def __enter__(self) -> SampleDriver:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def start(self) -> None:
        if self._printer is not None:
            return
        self._printer = threading.Thread(
            target=self._print_snapshots, name="rsampling-snapshot", daemon=True
        )
        self._printer.start()

    def close(self) -> None:
        if self._printer is None:
            return
        self._requests.put(None)
        self._printer.join()
        self._printer = None

    def _print_snapshots(self) -> None:
        while True:
            request = self._requests.get()
            if request is None:
                return
            self._emit()
            self.peeks += 1

    def _emit(self) -> int:
        records = self.reservoir.snapshot()
        with self._sink_lock:
            return write_sample(records, self.sink)

    def request_snapshot(self) -> None:
        self._requests.put(True)

    def handle_interrupt(self, signum: int, frame: object) -> None:
        if self.state is not DriverState.READING:
            # The final sample is already being written.
            return
        if self.on_interrupt == "exit":
            raise KeyboardInterrupt
        self.request_snapshot()

    def run(self, source: Iterable[str]) -> DriverResult:
        self.start()
        self.state = DriverState.READING
        try:
            for record in iter_records(source, strip=self.strip):
                self.reservoir.add(record)
            self.state = DriverState.EXHAUSTED
        except KeyboardInterrupt:
            self.state = DriverState.INTERRUPTED
        except (OSError, UnicodeDecodeError):
            self.state = DriverState.FAILED
            raise

        # Pending peeks print before the final sample.
        self.close()
        emitted = self._emit()
        return DriverResult(
            state=self.state,
            seen=self.reservoir.seen,
            emitted=emitted,
            peeks=self.peeks,
        )


@contextmanager
def interrupt_handler(driver: SampleDriver) -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        # Signal handlers can only be installed from the main thread.
        yield
        return

    previous = signal.signal(signal.SIGINT, driver.handle_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGINT, previous)


def sample_stream(
    source: Iterable[str], sink: TextIO | None, config: SampleConfig
) -> DriverResult:
    reservoir = Reservoir(config.sample_size, seed=config.seed)
    with SampleDriver(
        reservoir, sink=sink, on_interrupt=config.on_interrupt, strip=config.strip
    ) as driver:
        with interrupt_handler(driver):
            return driver.run(source)
