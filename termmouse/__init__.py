"""
Detect whether the controlling terminal supports mouse input.

https://pypi.python.org/pypi/termmouse
"""
# std imports
import platform as _platform

# isort: off
if _platform.system() == 'Windows':
    from termmouse.win_environment import Environment
else:
    from termmouse.environment import Environment  # type: ignore
from termmouse.identity import MouseProtocol, MouseCapability, TerminalIdentity
from termmouse.classify import classify_terminal, mouse_protocol_for
from termmouse.probe import probe_terminal
from termmouse.detect import detect_mouse_support, get_mouse_support_detail

__all__ = ('Environment', 'MouseProtocol', 'MouseCapability', 'TerminalIdentity',
           'classify_terminal', 'mouse_protocol_for', 'probe_terminal',
           'detect_mouse_support', 'get_mouse_support_detail')
__version__ = "1.0.0"
