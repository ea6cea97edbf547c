"""
console.py — terminal front-end for the provisioner
---------------------------------------------------
Version selector, download spinner and status lines. Styling is carried by a
ConsoleStyle passed in at construction; nothing here is global.
"""
from __future__ import annotations
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence, TextIO
from .models import ReleaseEntry


@dataclass(frozen=True)
class ConsoleStyle:
    color: bool = True
    checkmark: str = "✓"
    cross: str = "✗"
    warn_mark: str = "!"
    spinner_frames: Sequence[str] = ("⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷")
    spinner_interval: float = 0.1
    page_size: int = 12
    title: str = "Server version"

    # ANSI SGR codes
    ok_color: str = "92"
    error_color: str = "91"
    warn_color: str = "93"
    spinner_color: str = "95"
    title_color: str = "1;97;45"


class Spinner:
    """
    Animates a single status line on a background thread.

    ``stop()`` signals the thread and joins it; calling it more than once is
    harmless.
    """

    def __init__(self, console: "Console", message: str):
        self.console = console
        self.message = message
        self._done = threading.Event()
        self._thread = threading.Thread(target=self._spin, name="spinner", daemon=True)
        self._lock = threading.Lock()
        self._stopped = False

    def update(self, message: str) -> None:
        with self._lock:
            self.message = message

    def start(self) -> "Spinner":
        self._thread.start()
        return self

    def _spin(self) -> None:
        frames = self.console.style.spinner_frames
        i = 0
        while not self._done.is_set():
            with self._lock:
                msg = self.message
            frame = self.console.paint(frames[i % len(frames)], self.console.style.spinner_color)
            self.console.write(f"\r  {frame} {msg}\033[K")
            i += 1
            self._done.wait(self.console.style.spinner_interval)

    def stop(self) -> None:
        with self._lock:
            if self._stopped:
                return
            self._stopped = True
        self._done.set()
        if self._thread.is_alive():
            self._thread.join()
        if self.console.interactive:
            self.console.write("\r\033[K")


class Console:
    def __init__(self, style: Optional[ConsoleStyle] = None, out: Optional[TextIO] = None,
                 input_fn: Callable[[str], str] = input):
        self.out = out or sys.stdout
        self.input_fn = input_fn
        interactive = bool(getattr(self.out, "isatty", lambda: False)())
        self.interactive = interactive
        self.style = style or ConsoleStyle(color=interactive)

    def paint(self, text: str, code: str) -> str:
        if not self.style.color:
            return text
        return f"\033[{code}m{text}\033[0m"

    def write(self, text: str) -> None:
        if text:
            self.out.write(text)
            self.out.flush()

    def status(self, message: str, level: str = "ok") -> None:
        if level == "warn":
            mark = self.paint(self.style.warn_mark, self.style.warn_color)
        else:
            mark = self.paint(self.style.checkmark, self.style.ok_color)
        self.write(f"  {mark} {message}\n")

    def error(self, message: str) -> None:
        self.write(f"  {self.paint(self.style.cross, self.style.error_color)} {message}\n")

    @contextmanager
    def indicator(self, message: str) -> Iterator[Callable[[str], None]]:
        if not self.interactive:
            # no animation off a tty; each distinct progress line is printed once
            last = [message]
            self.write(f"  {message}\n")

            def report(line: str) -> None:
                if line != last[0]:
                    last[0] = line
                    self.write(f"  {line}\n")

            yield report
            return
        spinner = Spinner(self, message).start()
        try:
            yield spinner.update
        finally:
            spinner.stop()

    def select(self, candidates: Sequence[ReleaseEntry]) -> Optional[ReleaseEntry]:
        """
        Paged, numbered list. Enter picks the highlighted (newest) entry,
        ``n``/``p`` page, ``q`` cancels. Returns None on cancel.
        """
        if not candidates:
            self.error("No installable server versions found.")
            return None

        size = max(1, self.style.page_size)
        pages = (len(candidates) + size - 1) // size
        page = 0
        while True:
            start = page * size
            self.write("\n" + self.paint(f" {self.style.title} ", self.style.title_color) + "\n\n")
            for idx, entry in enumerate(candidates[start:start + size], start=start + 1):
                self.write(f"  {idx}. {entry.id}\n")
            if pages > 1:
                self.write(f"\n  page {page + 1}/{pages}  (n: next, p: previous)\n")
            try:
                answer = self.input_fn(f"\n  Choose a version [1-{len(candidates)}, q to quit] (1): ").strip().lower()
            except EOFError:
                return None

            if answer in ("q", "quit", "esc"):
                return None
            if answer == "":
                return candidates[0]
            if answer == "n":
                page = min(page + 1, pages - 1)
                continue
            if answer == "p":
                page = max(page - 1, 0)
                continue
            if answer.isdigit() and 1 <= int(answer) <= len(candidates):
                return candidates[int(answer) - 1]
            # also accept the version id itself
            for entry in candidates:
                if entry.id == answer:
                    return entry
            self.error(f"Unknown choice: {answer!r}")
