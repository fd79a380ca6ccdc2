"""Rendering of file references as links.

``render_file_link`` ties together the resource connector, the open-file
policy gate, the link decision engine and the HTML adapter.
"""

from .connector import ResolvedResource, resolve
from .decision import LinkDescriptor, LinkMode, OpenFileTarget, decide, select_mode
from .env import RenderEnv
from .file_link import render_file_link
from .html import render_link, write_link
from .policy import OpenFileGate, get_gate, import_provider, reset_gate, set_gate

__all__ = [
    "ResolvedResource",
    "resolve",
    "LinkDescriptor",
    "LinkMode",
    "OpenFileTarget",
    "decide",
    "select_mode",
    "RenderEnv",
    "render_file_link",
    "render_link",
    "write_link",
    "OpenFileGate",
    "get_gate",
    "import_provider",
    "reset_gate",
    "set_gate",
]
