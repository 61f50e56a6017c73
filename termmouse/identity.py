"""Records describing a guessed terminal emulator and its mouse support."""

# std imports
from collections import namedtuple


class MouseProtocol:
    """Mouse reporting protocols a terminal may understand."""
    # pylint: disable=too-few-public-methods

    #: no mouse reporting
    NONE = 'none'

    #: X11 mouse reporting, including the SGR (1006) extended encoding
    XTERM = 'xterm'

    #: Linux console mouse, available only through the gpm daemon
    GPM = 'gpm'

    #: All protocols, in order of preference
    names = (XTERM, GPM, NONE)


class TerminalIdentity(namedtuple('TerminalIdentity', (
        'is_interactive', 'is_remote_session', 'app_id', 'confident', 'generic_id'))):
    """
    Guessed identity of the terminal emulator, see :func:`~.classify_terminal`.

    .. py:attribute:: is_interactive

        whether the output stream is a terminal

    .. py:attribute:: is_remote_session

        whether running inside of an ssh session

    .. py:attribute:: app_id

        canonical emulator identity, such as ``'gnome-256color'``, or
        ``'none'`` and ``'unknown'`` when no guess is possible

    .. py:attribute:: confident

        whether :attr:`app_id` is believed to be the true emulator, rather
        than an xterm-compatible fallback

    .. py:attribute:: generic_id

        :attr:`app_id` when :attr:`confident`, otherwise a generic label
        such as ``'xterm'`` or ``'unknown'``
    """
    __slots__ = ()


class MouseCapability(namedtuple('MouseCapability',
                                 TerminalIdentity._fields + ('mouse_supported', 'protocol'))):
    """
    :class:`TerminalIdentity` extended by its mouse support.

    .. py:attribute:: mouse_supported

        whether mouse reporting is believed to be available

    .. py:attribute:: protocol

        one of the :class:`MouseProtocol` values, ``'none'`` exactly when
        :attr:`mouse_supported` is ``False``
    """
    __slots__ = ()

    @classmethod
    def from_identity(cls, identity: TerminalIdentity, protocol: str) -> 'MouseCapability':
        """
        Create instance from ``identity`` and one of the :class:`MouseProtocol` values.

        :raises ValueError: ``protocol`` is not a known protocol.
        """
        if protocol not in MouseProtocol.names:
            raise ValueError(f'Unknown mouse protocol: {protocol!r}')
        return cls(*identity, mouse_supported=protocol != MouseProtocol.NONE,
                   protocol=protocol)

    @property
    def identity(self) -> TerminalIdentity:
        """The :class:`TerminalIdentity` portion of this record."""
        return TerminalIdentity(*self[:len(TerminalIdentity._fields)])
