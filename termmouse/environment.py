# -*- coding: utf-8 -*-
"""Module containing :class:`Environment`, the ambient process state seen by detection."""
# std imports
import os
import sys
import codecs
import locale
import platform
import warnings
from typing import IO, Any, List, Mapping, Callable, Optional

HAS_TTY = True
if platform.system() == 'Windows':
    IS_WINDOWS = True
else:
    IS_WINDOWS = False

    try:
        import termios
        import tty
    except ImportError:
        _TTY_METHODS = ('get_mode', 'set_raw', 'set_mode')
        _MSG_NOSUPPORT = (
            "One or more of the modules: 'termios' and 'tty' "
            f"are not found on your platform '{platform.system()}'. "
            "The following methods of Environment are dummy/no-op "
            f"unless a deriving class overrides them: {', '.join(_TTY_METHODS)}."
        )
        warnings.warn(_MSG_NOSUPPORT)
        HAS_TTY = False

#: Largest number of bytes consumed by a single :meth:`Environment.read_input` call.
READ_SIZE = 1024


class Environment():
    """
    Process-wide state consulted while detecting mouse support.

    Environment variables, the platform name, interactivity of the output
    and input streams, and the terminal mode of the input stream are all
    reached through an instance of this class, so that callers and tests may
    substitute any part of it without touching the real process.
    """
    # pylint: disable=too-many-instance-attributes

    def __init__(self, environ: Optional[Mapping[str, str]] = None,
                 stream: Optional[IO[str]] = None,
                 platform: Optional[str] = None) -> None:
        # pylint: disable=redefined-outer-name
        """
        Initialize the environment.

        :arg dict environ: Mapping of environment variables. Defaults to
            :obj:`os.environ`, read at the time of each lookup.
        :arg file stream: A file-like object representing the terminal output.
            Defaults to :obj:`sys.__stdout__`. Input is read from
            :obj:`sys.__stdin__` only when ``stream`` is the default stdout
            or stderr.
        :arg str platform: Platform name in the form of :obj:`sys.platform`,
            such as ``'linux'``, ``'darwin'`` or ``'android'``.
        """
        self.errors: List[str] = [
            f'parameters: stream={stream!r}, platform={platform!r}',
        ]
        self._environ = os.environ if environ is None else environ
        self._platform = platform or sys.platform
        self._stream = stream
        self._keyboard_fd: Optional[int] = None
        self._is_a_tty = False
        self.__init__streams()
        self.__init__decoder()

    def __init__streams(self) -> None:
        stream_fd = None

        # Default stream is stdout
        if self._stream is None:
            self._stream = sys.__stdout__

        if not hasattr(self._stream, 'fileno'):
            self.errors.append('stream has no fileno method')
        elif not callable(self._stream.fileno):  # type: ignore
            self.errors.append('stream.fileno is not callable')
        else:
            try:
                stream_fd = self._stream.fileno()  # type: ignore
            except ValueError as err:
                # StringIO, or a stream "detached" by a test harness
                self.errors.append(f'Unable to determine output stream file descriptor: {err}')
            else:
                self._is_a_tty = os.isatty(stream_fd)
                if not self._is_a_tty:
                    self.errors.append('stream not a TTY')

        # Input is read from stdin only when the output stream is stdout or stderr.
        if self._stream in (sys.__stdout__, sys.__stderr__):
            try:
                if sys.__stdin__ is not None:
                    self._keyboard_fd = sys.__stdin__.fileno()
            except (AttributeError, ValueError) as err:
                self.errors.append(f'Unable to determine input stream file descriptor: {err}')
            else:
                if self._keyboard_fd is not None and not os.isatty(self._keyboard_fd):
                    self.errors.append('Input stream is not a TTY')
                    self._keyboard_fd = None
        else:
            self.errors.append('Output stream is not a default stream')

    def __init__decoder(self) -> None:
        self._encoding = self._input_encoding()
        try:
            self._keyboard_decoder = codecs.getincrementaldecoder(self._encoding)()
        except LookupError as err:
            # encoding is illegal or unsupported, use 'UTF-8'
            warnings.warn(f'LookupError: {err}, defaulting to UTF-8 for keyboard.')
            self._encoding = 'UTF-8'
            self._keyboard_decoder = codecs.getincrementaldecoder(self._encoding)()

    def _input_encoding(self) -> str:
        return locale.getpreferredencoding() or 'UTF-8'

    @property
    def environ(self) -> Mapping[str, str]:
        """Read-only property: mapping of environment variables."""
        return self._environ

    def getenv(self, key: str, default: str = '') -> str:
        """Return environment variable ``key``, or ``default`` when unset."""
        return self._environ.get(key, default)

    @property
    def platform(self) -> str:
        """Read-only property: platform name, as :obj:`sys.platform`."""
        return self._platform

    @property
    def stream(self) -> IO[str]:
        """Read-only property: stream the terminal outputs to."""
        return self._stream  # type: ignore

    @property
    def is_a_tty(self) -> bool:
        """
        Read-only property: Whether :attr:`~.stream` is a terminal.

        :rtype: bool
        """
        return self._is_a_tty

    @property
    def has_keyboard(self) -> bool:
        """
        Read-only property: Whether the input stream is a terminal.

        :rtype: bool
        """
        return self._keyboard_fd is not None

    def get_mode(self) -> Any:
        """
        Return the current terminal mode of the input stream.

        The value is opaque, meant only to be given back to :meth:`set_mode`.
        ``None`` is returned when there is no terminal input.
        """
        if HAS_TTY and self._keyboard_fd is not None:
            return termios.tcgetattr(self._keyboard_fd)
        return None

    def set_raw(self) -> None:
        """
        Place the input stream into raw mode, by :func:`tty.setraw`.

        Input is then delivered byte-by-byte, without echo or line editing.
        """
        if HAS_TTY and self._keyboard_fd is not None:
            # pylint: disable-next=possibly-used-before-assignment
            tty.setraw(self._keyboard_fd, termios.TCSANOW)

    def set_mode(self, mode: Any) -> None:
        """Restore a terminal ``mode`` previously returned by :meth:`get_mode`."""
        if HAS_TTY and self._keyboard_fd is not None and mode is not None:
            termios.tcsetattr(self._keyboard_fd, termios.TCSAFLUSH, mode)

    def write(self, text: str) -> None:
        """Write ``text`` to :attr:`stream` and flush it."""
        self.stream.write(text)
        self.stream.flush()

    def read_input(self) -> str:
        """
        Read and decode whatever is waiting on the input stream.

        Should only be called once the input stream is known to be readable,
        such as from a callback registered by :meth:`add_input_listener`.
        An incomplete multibyte sequence is held by the decoder until the
        next call.
        """
        assert self._keyboard_fd is not None
        data = os.read(self._keyboard_fd, READ_SIZE)
        return self._keyboard_decoder.decode(data, final=False)

    def add_input_listener(self, loop: Any, callback: Callable[[], None]) -> None:
        """Call ``callback`` from event ``loop`` whenever input is readable."""
        assert self._keyboard_fd is not None
        loop.add_reader(self._keyboard_fd, callback)

    def remove_input_listener(self, loop: Any) -> None:
        """Stop calling any callback registered by :meth:`add_input_listener`."""
        if self._keyboard_fd is not None:
            loop.remove_reader(self._keyboard_fd)


def default_environment() -> Environment:
    """Return an :class:`Environment` of the current process, suited to this platform."""
    if IS_WINDOWS:
        # pylint: disable-next=import-outside-toplevel
        from .win_environment import Environment as _WinEnvironment
        return _WinEnvironment()
    return Environment()
