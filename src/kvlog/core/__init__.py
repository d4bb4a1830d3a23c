"""kvlog core package."""

from .config import StoreConfig
from .store import LogStore

__all__ = ["LogStore", "StoreConfig"]
