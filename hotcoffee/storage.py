"""JSON file storage and preparation of the data directory."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Generic, Iterable, TypeVar

from hotcoffee.models import InventoryItem, MenuItem, Order

DEFAULT_DATA_DIR = "data"
DEFAULT_PORT = "7070"

MENU_FILE = "menu.json"
INVENTORY_FILE = "inventory.json"
ORDERS_FILE = "orders.json"
REPORT_LOG = "report.log"

_HELP = """Coffee Shop Management System

Usage:
hot-coffee [--port <N>] [--dir <S>] 
hot-coffee --help

Options:
--help       Show this screen.
--port N     Port number.
--dir S      Path to the data directory."""

T = TypeVar("T")


class JsonRepository(Generic[T]):
    """A list of records kept in a single JSON file."""

    def __init__(self, path: str | Path, item_type: Any) -> None:
        self.path = Path(path)
        self.item_type = item_type

    def load(self) -> list[T]:
        """Read every record from the file."""
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if data is None:
            return []
        if not isinstance(data, list):
            raise ValueError(f"{self.path} does not hold a JSON array")
        return [self.item_type.from_dict(entry) for entry in data]

    def save(self, items: Iterable[T]) -> None:
        """Replace the file contents with the given records."""
        payload = [item.to_dict() for item in items]
        self.path.write_text(
            json.dumps(payload, indent="\t", ensure_ascii=False), encoding="utf-8"
        )


def menu_repository(path: str | Path) -> JsonRepository[MenuItem]:
    return JsonRepository(path, MenuItem)


def inventory_repository(path: str | Path) -> JsonRepository[InventoryItem]:
    return JsonRepository(path, InventoryItem)


def order_repository(path: str | Path) -> JsonRepository[Order]:
    return JsonRepository(path, Order)


class _ReportFormatter(logging.Formatter):
    _LEVELS = {"WARNING": "WARN", "CRITICAL": "ERROR"}

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).astimezone()
        level = self._LEVELS.get(record.levelname, record.levelname)
        message = json.dumps(record.getMessage(), ensure_ascii=False)
        return f"time={stamp.isoformat(timespec='milliseconds')} level={level} msg={message}"


class _ReportHandler(logging.FileHandler):
    """File handler writing the shop's report log."""


def prepare_data_dir(directory: str | Path) -> logging.Logger:
    """Create the data directory and its files, and route logging to report.log."""
    directory = Path(directory)
    directory.mkdir(exist_ok=True)

    log_path = directory / REPORT_LOG
    log_path.touch(exist_ok=True)

    for name in (MENU_FILE, INVENTORY_FILE, ORDERS_FILE):
        path = directory / name
        if not path.exists():
            path.write_text("[]", encoding="utf-8")

    logger = logging.getLogger("hotcoffee")
    for handler in list(logger.handlers):
        if isinstance(handler, _ReportHandler):
            logger.removeHandler(handler)
            handler.close()
    handler = _ReportHandler(log_path, mode="a", encoding="utf-8")
    handler.setFormatter(_ReportFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    return logger


def help_text() -> str:
    """Return the usage message shown for --help."""
    return _HELP