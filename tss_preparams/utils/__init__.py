"""
Utility functions for preparation parameter generation.
"""

from .helpers import (
    LOGGER_NAME,
    setup_logging,
    Observer,
    LoggingObserver,
    TimingRecorder,
    format_time
)

__all__ = [
    'LOGGER_NAME',
    'setup_logging',
    'Observer',
    'LoggingObserver',
    'TimingRecorder',
    'format_time'
]
