"""Module containing Windows version of :class:`Environment`."""


# std imports
import locale
import msvcrt  # pylint: disable=import-error
from typing import Any, Callable

# 3rd party
from jinxed import win32  # pylint: disable=import-error

# local
from .environment import Environment as _Environment

#: Interval, in seconds, between checks for console input.
POLL_INTERVAL = 0.01


class Environment(_Environment):
    """Windows subclass of :class:`Environment`."""

    def _input_encoding(self) -> str:
        return win32.get_console_input_encoding() or locale.getpreferredencoding() or 'UTF-8'

    def get_mode(self) -> Any:
        """
        Return the current console mode of the input stream.

        This is the value of ``jinxed.win32.get_console_mode()``, or ``None``
        when there is no console input.
        """
        if self._keyboard_fd is not None:
            return win32.get_console_mode(msvcrt.get_osfhandle(self._keyboard_fd))
        return None

    def set_raw(self) -> None:
        """Place the console input into raw mode, by ``jinxed.win32.setraw()``."""
        if self._keyboard_fd is not None:
            win32.setraw(msvcrt.get_osfhandle(self._keyboard_fd))

    def set_mode(self, mode: Any) -> None:
        """Restore a console ``mode`` previously returned by :meth:`get_mode`."""
        if self._keyboard_fd is not None and mode is not None:
            win32.set_console_mode(msvcrt.get_osfhandle(self._keyboard_fd), mode)

    def read_input(self) -> str:
        r"""
        Read whatever is waiting on the console input.

        For versions of Windows 10.0.10586 and later, the console is expected
        to be in ENABLE_VIRTUAL_TERMINAL_INPUT mode and the default method is
        called. For older versions, :func:`msvcrt.getwch` is used.
        """
        if win32.VTMODE_SUPPORTED:
            return super().read_input()

        text = ''
        while msvcrt.kbhit():
            text += msvcrt.getwch()
        return text

    def add_input_listener(self, loop: Any, callback: Callable[[], None]) -> None:
        """
        Call ``callback`` from event ``loop`` whenever console input is waiting.

        Console handles cannot be watched by the event loop's selector, so
        :func:`msvcrt.kbhit` is polled every :data:`POLL_INTERVAL` seconds.
        """
        def _poll() -> None:
            if msvcrt.kbhit():
                callback()
            self._poll_handle = loop.call_later(POLL_INTERVAL, _poll)

        # pylint: disable=attribute-defined-outside-init
        self._poll_handle = loop.call_soon(_poll)

    def remove_input_listener(self, loop: Any) -> None:
        """Stop polling for console input."""
        handle = getattr(self, '_poll_handle', None)
        if handle is not None:
            handle.cancel()
            self._poll_handle = None  # pylint: disable=attribute-defined-outside-init
