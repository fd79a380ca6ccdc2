"""Core abstractions shared across filelink layers."""

from . import errors as errors
from .errors import *  # noqa: F401,F403

__all__ = tuple(errors.__all__)
