"""
Sub-module providing a heuristic guess of the terminal emulator.

Nothing here performs any I/O: the terminal emulator is guessed only by
environment variables and platform name, and then mapped to the mouse
reporting protocol such an emulator is known to support.
"""
# std imports
import re
import posixpath
from typing import Dict, Callable, Optional
from collections import namedtuple

# local
from .identity import MouseProtocol, TerminalIdentity
from .environment import Environment, default_environment

#: ``VTE_VERSION`` of a terminal confidently identified as GNOME Terminal
VTE_VERSION_GNOME = 3803

#: Generic label of a terminal that is merely xterm-compatible
GENERIC_ID = 'xterm'

#: Identity of a terminal that could not be guessed
UNKNOWN_ID = 'unknown'

#: Identity when output is not a terminal
NONE_ID = 'none'

#: Values of ``TERM`` advertised by many terminals, and so not a confident guess
AMBIGUOUS_TERMS = ('xterm', 'xterm-256color')

RE_256COLOR = re.compile('256')
RE_TRUECOLOR = re.compile(r'^(truecolor|24bits?)$')
RE_KONSOLE = re.compile('KONSOLE')

_Guess = namedtuple('_Guess', 'app_id confident generic_id')
_Hints = namedtuple('_Hints', 'term many_colors truecolor platform environ')


def _colors(name: str, hints: _Hints) -> str:
    return f'{name}-256color' if hints.many_colors else name


def _parse_version(value: str) -> int:
    match = re.match(r'\d+', value)
    return int(match.group()) if match else 0


def _keep(guess: _Guess, hints: _Hints) -> _Guess:
    # pylint: disable=unused-argument
    return guess


def _gnome(guess: _Guess, hints: _Hints) -> _Guess:
    return guess._replace(app_id=_colors('gnome', hints))


def _konsole(guess: _Guess, hints: _Hints) -> _Guess:
    return guess._replace(app_id=_colors('konsole', hints))


def _rxvt(guess: _Guess, hints: _Hints) -> _Guess:
    many_colors = hints.term == 'rxvt' or hints.many_colors
    return guess._replace(app_id='rxvt-256color' if many_colors else 'rxvt')


def _eterm(guess: _Guess, hints: _Hints) -> _Guess:
    return guess._replace(app_id=_colors('eterm', hints))


def _xfce(guess: _Guess, hints: _Hints) -> _Guess:
    # pylint: disable=unused-argument
    return guess._replace(app_id='xfce')


def _kitty(guess: _Guess, hints: _Hints) -> _Guess:
    # pylint: disable=unused-argument
    return guess._replace(app_id='kitty')


def _osx(guess: _Guess, hints: _Hints) -> _Guess:
    # pylint: disable=unused-argument
    return guess._replace(app_id='osx-256color')


def _xterm(guess: _Guess, hints: _Hints) -> _Guess:
    """
    Disambiguate a terminal that advertises itself as xterm.

    Many terminals claim to be xterm. Unless already confident, the first
    matching hint wins: true color, ``VTE_VERSION``, macOS, and finally any
    environment variable named like ``KONSOLE_*``.
    """
    if guess.confident:
        return guess
    if hints.truecolor:
        return guess._replace(app_id='xterm-truecolor', generic_id='xterm-truecolor')
    vte_version = hints.environ.get('VTE_VERSION')
    if vte_version:
        return guess._replace(app_id=_colors('gnome', hints),
                              confident=_parse_version(vte_version) >= VTE_VERSION_GNOME)
    # macOS terminals advertise themselves as xterm, while having their own terminfo
    if hints.platform == 'darwin':
        return guess._replace(app_id='osx-256color')
    if any(RE_KONSOLE.search(name) for name in hints.environ):
        return guess._replace(app_id=_colors('konsole', hints), confident=True)
    return guess


#: Canonicalization rule of each known terminal identity
CANONICAL_RULES: Dict[str, Callable[[_Guess, _Hints], _Guess]] = {
    'xterm': _xterm,
    'xterm-256color': _xterm,

    'linux': _keep,
    'aterm': _keep,
    'kuake': _keep,
    'tilda': _keep,
    'terminology': _keep,
    'wterm': _keep,
    'mrxvt': _keep,
    'atomic-terminal': _keep,
    'xterm-truecolor': _keep,
    'termux': _keep,

    # terminator and guake are built on the gnome terminal library
    'gnome': _gnome,
    'gnome-256color': _gnome,
    'gnome-terminal': _gnome,
    'gnome-terminal-256color': _gnome,
    'terminator': _gnome,
    'guake': _gnome,

    'konsole': _konsole,
    'konsole-256color': _konsole,

    'rxvt': _rxvt,
    'rxvt-xpm': _rxvt,
    'rxvt-unicode': _rxvt,
    'rxvt-unicode-256color': _rxvt,
    'urxvt': _rxvt,
    'urxvt-ml': _rxvt,
    'urxvt256c': _rxvt,
    'urxvt256c-ml': _rxvt,

    'xfce': _xfce,
    'xfce-terminal': _xfce,
    'xfce4-terminal': _xfce,

    'eterm': _eterm,
    'Eterm': _eterm,

    'kitty': _kitty,
    'xterm-kitty': _kitty,

    'iTerm': _osx,
    'iterm': _osx,
    'iTerm2': _osx,
    'iterm2': _osx,
    'iTerm.app': _osx,
    'Terminal.app': _osx,
    'Terminal': _osx,
    'terminal': _osx,
    'Apple_Terminal': _osx,
}

#: Canonical identities of terminals known to support X11/SGR mouse reporting
XTERM_MOUSE_TERMINALS = frozenset((
    'xterm', 'xterm-256color', 'xterm-truecolor',
    'gnome', 'gnome-256color',
    'konsole', 'konsole-256color',
    'rxvt', 'rxvt-256color', 'mrxvt', 'aterm',
    'eterm', 'eterm-256color',
    'xfce', 'tilda', 'kuake', 'terminology', 'atomic-terminal',
    'kitty', 'osx-256color', 'termux',
    'alacritty', 'wezterm', 'ghostty', 'xterm-ghostty', 'foot', 'foot-extra',
    'vscode', 'hyper', 'tabby', 'mintty', 'putty', 'contour', 'rio',
    'st', 'st-256color',
    'tmux', 'tmux-256color', 'screen', 'screen-256color',
))

#: Canonical identity of the linux console, whose mouse is served by the gpm daemon
GPM_TERMINAL = 'linux'


def classify_terminal(env: Optional[Environment] = None) -> TerminalIdentity:
    """
    Guess the terminal emulator from environment variables and platform.

    :arg Environment env: environment to inspect, default is the current process.
    :rtype: TerminalIdentity
    :returns: the guessed identity, never raises.

    The guess is seeded by ``COLORTERM`` (unless it only declares true color),
    then ``TERM_PROGRAM``, then ``TERM``, and canonicalized by
    :data:`CANONICAL_RULES`. Unrecognized values are passed through in lower
    case with a generic label of ``'unknown'``.
    """
    if env is None:
        env = default_environment()

    is_remote_session = bool(env.getenv('SSH_CONNECTION'))
    if not env.is_a_tty:
        return TerminalIdentity(is_interactive=False, is_remote_session=is_remote_session,
                                app_id=NONE_ID, confident=True, generic_id=NONE_ID)

    term = env.getenv('TERM')
    colorterm = env.getenv('COLORTERM')
    truecolor = bool(RE_TRUECOLOR.match(colorterm))
    hints = _Hints(term=term,
                   many_colors=bool(RE_256COLOR.search(term) or
                                    RE_256COLOR.search(colorterm) or truecolor),
                   truecolor=truecolor,
                   platform=env.platform,
                   environ=env.environ)

    app_id = (colorterm if colorterm and not truecolor else '') or env.getenv('TERM_PROGRAM') or term
    if env.platform == 'darwin':
        # some emulators set a full path, such as /Applications/iTerm.app
        app_id = posixpath.basename(app_id)
    elif env.platform == 'android' and env.getenv('TERMUX_VERSION'):
        app_id = 'termux'

    if not app_id:
        return TerminalIdentity(is_interactive=True, is_remote_session=is_remote_session,
                                app_id=UNKNOWN_ID, confident=False, generic_id=UNKNOWN_ID)

    confident = app_id != term or term not in AMBIGUOUS_TERMS
    rule = CANONICAL_RULES.get(app_id)
    if rule is None:
        guess = _Guess(app_id=app_id.lower(), confident=confident, generic_id=UNKNOWN_ID)
    else:
        guess = rule(_Guess(app_id=app_id, confident=confident, generic_id=GENERIC_ID), hints)

    return TerminalIdentity(is_interactive=True,
                            is_remote_session=is_remote_session,
                            app_id=guess.app_id,
                            confident=guess.confident,
                            generic_id=guess.app_id if guess.confident else guess.generic_id)


def mouse_protocol_for(app_id: str) -> str:
    """
    Return the :class:`MouseProtocol` of canonical terminal identity ``app_id``.

    The linux console is presumed to offer a mouse through the gpm daemon,
    though the daemon is not checked for.
    """
    if app_id in XTERM_MOUSE_TERMINALS:
        return MouseProtocol.XTERM
    if app_id == GPM_TERMINAL:
        return MouseProtocol.GPM
    return MouseProtocol.NONE

