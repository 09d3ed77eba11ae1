"""Logging setup for command line entry points."""

from __future__ import annotations

import json
import logging
import sys
from typing import Literal

PLAIN_FORMAT = "%(levelname)s - %(name)s - %(message)s"


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record; message text is escaped by ``json.dumps``."""

    def __init__(self):
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "time": self.formatTime(record, self.datefmt),
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = "INFO", mode: Literal["plain", "json"] = "plain") -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    # stdout is reserved for the CLI envelope
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonLineFormatter() if mode == "json" else logging.Formatter(PLAIN_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())
