"""Utility modules for configuration, logging, and error handling."""

from .config import load_config, get_config
from .logger import get_logger
from .data_uri import parse_data_uri, build_data_uri, decode_data_uri

__all__ = [
    "load_config",
    "get_config",
    "get_logger",
    "parse_data_uri",
    "build_data_uri",
    "decode_data_uri",
]
