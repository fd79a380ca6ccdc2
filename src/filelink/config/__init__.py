"""Configuration models and YAML loading."""

from .loader import load_config, parse_set_overrides
from .models import FilelinkConfig

__all__ = ["FilelinkConfig", "load_config", "parse_set_overrides"]
