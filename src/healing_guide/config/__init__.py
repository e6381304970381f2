"""Configuration for healing-guide."""

from .settings import AppConfig, RetryPolicy, load_config

__all__ = ["AppConfig", "RetryPolicy", "load_config"]
