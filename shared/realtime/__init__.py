from .feed import AUTH_CHANNEL, ChangeEvent, ChangeFeed, get_change_feed
from .debounce import DebouncedTask

__all__ = [
    "AUTH_CHANNEL",
    "ChangeEvent",
    "ChangeFeed",
    "get_change_feed",
    "DebouncedTask",
]
