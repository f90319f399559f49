"""Local terminal handling for interactive sessions."""
import contextlib
import os
import signal
import termios
import threading
import tty
from typing import Callable, Iterator, Optional, Tuple


def is_terminal(fd: Optional[int]) -> bool:
    return fd is not None and os.isatty(fd)


def terminal_size(fd: Optional[int]) -> Optional[Tuple[int, int]]:
    """Returns (columns, lines) for a terminal fd, or None if it is not one."""
    if not is_terminal(fd):
        return None
    try:
        size = os.get_terminal_size(fd)
    except OSError:
        return None
    return size.columns, size.lines


@contextlib.contextmanager
def raw_mode(fd: Optional[int]) -> Iterator[None]:
    """Puts a terminal in raw mode, restoring its attributes on exit."""
    if not is_terminal(fd):
        yield
        return

    saved = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


@contextlib.contextmanager
def on_resize(callback: Callable[[], None]) -> Iterator[None]:
    """Invokes callback on SIGWINCH. Signals can only be handled on the main thread."""
    if (
        not hasattr(signal, "SIGWINCH")
        or threading.current_thread() is not threading.main_thread()
    ):
        yield
        return

    previous = signal.signal(signal.SIGWINCH, lambda signum, frame: callback())
    try:
        yield
    finally:
        signal.signal(signal.SIGWINCH, previous)
