"""
Structured logging utility.
Single responsibility: provide consistent logging across application.
"""

import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


LEVELS = {"DEBUG": 10, "INFO": 20, "WARN": 30, "ERROR": 40}


class StructuredLogger:
    """
    Event logger for the comparison engine.

    Events are dotted names (``differ.completed``, ``session.left_loaded``)
    with keyword context. Events at or above ``level`` are printed to stderr;
    when a log file is attached every event is appended to it as one JSON
    line.
    """

    def __init__(self, name: str = "sheet-diff",
                 log_file: Optional[Path] = None,
                 level: str = "INFO"):
        self.name = name
        self.log_file = Path(log_file) if log_file else None
        self.set_level(level)

    def set_level(self, level: str):
        """Change the minimum console level."""
        if level not in LEVELS:
            raise ValueError(f"Unknown log level: {level}")
        self.level = level

    def set_log_file(self, log_file: Optional[Path]):
        """Attach (or detach with None) a JSON lines log file."""
        self.log_file = Path(log_file) if log_file else None

    def log(self, level: str, event: str, **context: Any):
        """
        Record one event.

        Args:
            level: One of LEVELS
            event: Dotted event name
            **context: Values describing the event
        """
        entry: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "logger": self.name,
            "message": event,
        }
        if context:
            entry["context"] = context

        if LEVELS[level] >= LEVELS[self.level]:
            clock = entry["timestamp"].split("T")[1][:8]
            lines = [f"[{clock}] {level:5} | {event}"]
            lines += [f"  {key}={value}" for key, value in context.items()]
            print("\n".join(lines), file=sys.stderr)

        if self.log_file:
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, default=str, ensure_ascii=False) + "\n")

    def debug(self, event: str, **context: Any):
        self.log("DEBUG", event, **context)

    def info(self, event: str, **context: Any):
        self.log("INFO", event, **context)

    def warning(self, event: str, **context: Any):
        self.log("WARN", event, **context)

    def error(self, event: str, **context: Any):
        self.log("ERROR", event, **context)


_logger: Optional[StructuredLogger] = None


def get_logger(name: str = "sheet-diff") -> StructuredLogger:
    """Process-wide logger; created on first use."""
    global _logger
    if _logger is None:
        _logger = StructuredLogger(name)
    return _logger
