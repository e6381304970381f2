"""Service implementations for core abstractions."""

from .background import BackgroundWriter
from .resilience import SimpleResilienceManager, with_retry
from .single_flight import SingleFlight

__all__ = ["BackgroundWriter", "SimpleResilienceManager", "SingleFlight", "with_retry"]
