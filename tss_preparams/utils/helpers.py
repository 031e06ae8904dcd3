"""
Utility functions for preparation parameter generation.

Provides helpers for:
- Logging configuration
- Observers that receive timings from the generation path
- Time formatting
"""

import os
import json
import logging
import threading
from datetime import datetime
from typing import Any, Dict, List, Optional


LOGGER_NAME = 'tss_preparams'


def setup_logging(
    log_dir: Optional[str] = './logs',
    log_level: int = logging.INFO,
    run_name: Optional[str] = None
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        log_dir: Directory for log files (None = console only)
        log_level: Logging level
        run_name: Name used for the log file

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)
    logger.handlers = []

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        name = run_name if run_name else 'preparams'
        log_file = os.path.join(log_dir, f'{name}_{timestamp}.log')

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


class Observer:
    """Receives timings and events from the generation path. Ignores them."""

    def record_duration(self, name: str, seconds: float):
        pass

    def record_event(self, name: str, **fields: Any):
        pass


class LoggingObserver(Observer):
    """Reports timings through the package logger at DEBUG level."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(LOGGER_NAME)

    def record_duration(self, name: str, seconds: float):
        self.logger.debug('%s done. took %s', name, format_time(seconds))

    def record_event(self, name: str, **fields: Any):
        details = ', '.join(f'{key}={value}' for key, value in sorted(fields.items()))
        self.logger.debug('%s: %s', name, details)


class TimingRecorder(Observer):
    """Keeps timings and events in memory."""

    def __init__(self):
        self._lock = threading.Lock()
        self.durations: Dict[str, List[float]] = {}
        self.events: List[Dict[str, Any]] = []

    def record_duration(self, name: str, seconds: float):
        with self._lock:
            self.durations.setdefault(name, []).append(seconds)

    def record_event(self, name: str, **fields: Any):
        with self._lock:
            self.events.append(dict(fields, name=name))

    def get_latest(self, name: str) -> Optional[float]:
        """Get latest duration recorded under name."""
        values = self.durations.get(name, [])
        return values[-1] if values else None

    def get_total(self, name: str) -> float:
        return sum(self.durations.get(name, []))

    def get_events(self, name: str) -> List[Dict[str, Any]]:
        return [event for event in self.events if event['name'] == name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        with self._lock:
            return {
                'durations': {k: list(v) for k, v in self.durations.items()},
                'events': [dict(e) for e in self.events]
            }

    def save(self, path: str):
        """Save timings to JSON file."""
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str) -> 'TimingRecorder':
        """Load timings from JSON file."""
        recorder = cls()
        with open(path, 'r') as f:
            data = json.load(f)
        recorder.durations = data.get('durations', {})
        recorder.events = data.get('events', [])
        return recorder


def format_time(seconds: float) -> str:
    """Format seconds to human-readable string."""
    if seconds < 1:
        return f'{seconds * 1000:.0f}ms'

    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)

    if hours > 0:
        return f'{hours}h {minutes}m {secs}s'
    elif minutes > 0:
        return f'{minutes}m {secs}s'
    else:
        return f'{secs}s'
