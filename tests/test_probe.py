# -*- coding: utf-8 -*-
"""Tests for the query/response round-trip with the terminal."""
# std imports
import io
import os
import time
import asyncio
from unittest import mock

# 3rd party
import pytest

# local
from termmouse import Environment, probe_terminal
from termmouse.probe import DEVICE_ATTRIBUTES_QUERY
from .accessories import TestEnvironment
from .conftest import IS_WINDOWS

pytestmark = [
    pytest.mark.anyio,
    pytest.mark.skipif(IS_WINDOWS, reason="input of TestEnvironment is a pipe"),
]

DA1_RESPONSE = '\x1b[?62;4;22c'


async def test_probe_response(env):
    """A response ending in 'c' is returned whole."""
    env.response = DA1_RESPONSE
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env) == DA1_RESPONSE
    assert env.output == '\x1b[c'


async def test_probe_response_in_chunks(env):
    """Chunks of input are accumulated until the final 'c'."""
    env.response = '\x1b[?62;'
    asyncio.get_running_loop().call_later(0.05, env.respond, '4;22c')
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env) == DA1_RESPONSE


async def test_probe_garbage_ending_in_c(env):
    """Any input ending in 'c' completes the response, whatever it is."""
    env.response = 'abc'
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env) == 'abc'


async def test_probe_timeout(env):
    """No response within timeout returns None, without much delay."""
    stime = time.monotonic()
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 0.1, env=env) is None
    assert 0.09 <= time.monotonic() - stime < 1.0
    assert env.output == '\x1b[c'


async def test_probe_incomplete_response_times_out(env):
    """A response never ending in 'c' is no response at all."""
    env.response = '\x1b[?62;4;22'
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 0.1, env=env) is None


async def test_probe_without_keyboard():
    """Without terminal input nothing is written and the mode is untouched."""
    env = TestEnvironment(has_keyboard=False, response=DA1_RESPONSE)
    assert await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env) is None
    assert env.output == ''
    assert env.mode_changes == []


@pytest.mark.parametrize('raw', [False, True])
async def test_probe_restores_mode_on_response(raw):
    """The mode found on entry is restored after a response."""
    env = TestEnvironment(raw=raw, response=DA1_RESPONSE)
    try:
        await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env)
        assert env.mode_changes == ['raw', raw]
        assert env.is_raw is raw
    finally:
        env.close()


@pytest.mark.parametrize('raw', [False, True])
async def test_probe_restores_mode_on_timeout(raw):
    """The mode found on entry is restored after a timeout."""
    env = TestEnvironment(raw=raw)
    try:
        await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 0.05, env=env)
        assert env.mode_changes == ['raw', raw]
        assert env.is_raw is raw
    finally:
        env.close()


async def test_probe_read_error(env):
    """A failure to read input is raised, after the mode is restored."""
    env.response = DA1_RESPONSE
    with mock.patch.object(env, 'read_input', side_effect=OSError(5, 'Input/output error')):
        with pytest.raises(OSError):
            await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env)
    assert env.mode_changes == ['raw', False]
    assert env.is_raw is False


async def test_probe_set_raw_error(env):
    """A failure to enter raw mode is raised, and the mode restored."""
    with mock.patch.object(env, 'set_raw', side_effect=OSError(25, 'Not a tty')):
        with pytest.raises(OSError):
            await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env)
    assert env.mode_changes == [False]
    assert env.output == ''


async def test_probe_removes_input_listener(env):
    """The input listener is removed after the response, leaving later input unread."""
    env.response = DA1_RESPONSE
    with mock.patch.object(env, 'read_input', wraps=env.read_input) as read_input:
        await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 1.0, env=env)
        calls = read_input.call_count
        env.respond('x')
        await asyncio.sleep(0.05)
        assert read_input.call_count == calls


@pytest.mark.parametrize('response', [DA1_RESPONSE, None])
async def test_pty_mode_restored(response):
    """The termios attributes of a real terminal are unchanged afterwards."""
    import pty
    import termios
    master_fd, slave_fd = pty.openpty()
    try:
        env = Environment(environ={}, stream=io.StringIO())
        env._keyboard_fd = slave_fd  # pylint: disable=protected-access
        before = termios.tcgetattr(slave_fd)
        if response is not None:
            asyncio.get_running_loop().call_later(
                0.05, os.write, master_fd, response.encode('ascii'))
        result = await probe_terminal(DEVICE_ATTRIBUTES_QUERY, 0.5, env=env)
        assert result == response
        assert termios.tcgetattr(slave_fd) == before
    finally:
        os.close(slave_fd)
        os.close(master_fd)
