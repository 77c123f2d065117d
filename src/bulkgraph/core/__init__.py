"""Core infrastructure: configuration, logging, events, memory and storage."""

from bulkgraph.core.config import ComputerSettings, load_settings
from bulkgraph.core.events import EventBus, EventBusProtocol, NullEventBus
from bulkgraph.core.logging import configure_logging, get_logger
from bulkgraph.core.memory import ComputationMemory, validate_memory_keys
from bulkgraph.core.storage import LocalFileSystemStorage

__all__ = [
    "ComputationMemory",
    "ComputerSettings",
    "EventBus",
    "EventBusProtocol",
    "LocalFileSystemStorage",
    "NullEventBus",
    "configure_logging",
    "get_logger",
    "load_settings",
    "validate_memory_keys",
]
