"""Sub-module deciding whether the terminal supports the mouse."""
# std imports
import logging
from typing import Optional

# local
from .probe import DEVICE_ATTRIBUTES_QUERY, probe_terminal
from .classify import classify_terminal, mouse_protocol_for
from .identity import MouseCapability
from .environment import Environment, default_environment

#: Default time, in seconds, to await a response to :data:`~.DEVICE_ATTRIBUTES_QUERY`
DEFAULT_TIMEOUT = 0.3

#: Control Sequence Introducer, which begins any structured response
CSI = '\x1b['

log = logging.getLogger(__name__)


def get_mouse_support_detail(env: Optional[Environment] = None) -> MouseCapability:
    """
    Guess mouse support by environment variables only.

    :arg Environment env: environment to inspect, default is the current process.
    :rtype: MouseCapability
    :returns: identity of the terminal by :func:`~.classify_terminal`,
        extended by the mouse protocol such a terminal is known to support.

    No input or output is performed, so this is safe to call at any time.
    """
    identity = classify_terminal(env)
    return MouseCapability.from_identity(identity, mouse_protocol_for(identity.app_id))


async def detect_mouse_support(timeout: float = DEFAULT_TIMEOUT,
                               env: Optional[Environment] = None) -> bool:
    """
    Return whether the terminal supports mouse input.

    :arg float timeout: Time in seconds to await the terminal's response.
    :arg Environment env: environment to query, default is the current process.
    :rtype: bool
    :returns: True if mouse input is believed to be supported. Never raises.

    When output is not a terminal, or the ``CI`` environment variable is
    set, ``False`` is returned without any query: nobody is there to answer
    and a batch job should never be held waiting.

    Otherwise the terminal is asked for its Device Attributes. Any terminal
    answering with an escape sequence is presumed to support mouse
    reporting. When no such answer arrives, for timeout, garbage or error,
    the verdict of :func:`get_mouse_support_detail` is returned instead.
    """
    if env is None:
        env = default_environment()

    if not env.is_a_tty or env.getenv('CI'):
        return False

    try:
        response = await probe_terminal(DEVICE_ATTRIBUTES_QUERY, timeout, env=env)
    except Exception as err:  # pylint: disable=broad-except
        log.debug('device attributes query failed: %s', err, exc_info=True)
        response = None

    if response and CSI in response:
        return True

    detail = get_mouse_support_detail(env)
    log.debug('falling back to %r', detail)
    return detail.mouse_supported
