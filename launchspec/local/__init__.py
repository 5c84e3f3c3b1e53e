"""
Local package for the launchspec tooling.

This package provides the effective, override-aware settings through the
effective_settings singleton, and the consumer-side launch helpers in
`launchspec.local.launch`.
"""

from .config import effective_settings

__all__ = ["effective_settings"]
