"""Sub-module providing a single query/response round-trip with the terminal."""
# std imports
import asyncio
import logging
from typing import List, Optional

# local
from .environment import Environment, default_environment

#: Primary Device Attributes (DA1) request
DEVICE_ATTRIBUTES_QUERY = '\x1b[c'

#: Final character of a Device Attributes response, such as ``'\x1b[?1;2c'``
RESPONSE_TERMINATOR = 'c'

log = logging.getLogger(__name__)


async def probe_terminal(sequence: str, timeout: float,
                         env: Optional[Environment] = None) -> Optional[str]:
    r"""
    Write query ``sequence`` to the terminal and await its response.

    :arg str sequence: Query string written to output, such as ``'\x1b[c'``.
    :arg float timeout: Return after time elapsed in seconds.
    :arg Environment env: environment to query, default is the current process.
    :rtype: str or None
    :returns: All text received up to and including a final ``'c'``, or None
        when no such response arrives within ``timeout`` or input is not a
        terminal.
    :raises OSError: reading input or changing its mode has failed.

    The input stream is placed into raw mode for the duration of the query,
    so that the response is received without awaiting a human to press the
    return key, and without echo. The mode found on entry is restored, and
    the input listener removed, before this coroutine returns by any path.

    Only one query may be in flight on the same input stream.
    """
    if env is None:
        env = default_environment()

    if not env.has_keyboard:
        return None

    loop = asyncio.get_running_loop()
    response: 'asyncio.Future[str]' = loop.create_future()
    chunks: List[str] = []

    def _on_input() -> None:
        # input arriving after a response, or after a timeout, is not ours.
        if response.done():
            return
        try:
            chunks.append(env.read_input())
        except (OSError, ValueError) as err:
            response.set_exception(err)
            return
        text = ''.join(chunks)
        if text.endswith(RESPONSE_TERMINATOR):
            response.set_result(text)

    save_mode = env.get_mode()
    try:
        env.set_raw()
        env.add_input_listener(loop, _on_input)
        env.write(sequence)
        return await asyncio.wait_for(response, timeout)
    except asyncio.TimeoutError:
        log.debug('no response to %r within %ss, received %r',
                  sequence, timeout, ''.join(chunks))
        return None
    finally:
        env.remove_input_listener(loop)
        env.set_mode(save_mode)
