"""
Append-only audit trail of mutations.

One line per successful insert/update/delete:
    [2024-05-01 14:03:12] [127.0.0.1] INSERT on users (ID: 7) - ana@x.com

The file is written through a dedicated logger that does not propagate to the
application log. Write failures are reported by the logging module's handler
error path and never fail the request. Nothing in the app reads the file back.
"""
import logging
from pathlib import Path

_FORMAT = "[%(asctime)s] %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class AuditLog:
    def __init__(self, path: str):
        self.path = Path(path)
        self.logger = logging.getLogger(f"audit.{self.path.resolve()}")
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False
        self._handler = None

    def _ensure_handler(self) -> None:
        if self._handler is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(self.path, mode="a", encoding="utf-8", delay=True)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATEFMT))
        self.logger.addHandler(handler)
        self._handler = handler

    def record(self, operation: str, table: str, record_id, ip: str | None = None, details: str = "") -> None:
        try:
            self._ensure_handler()
        except OSError as e:
            logging.getLogger(__name__).warning("Audit log unavailable at %s: %s", self.path, e)
            return
        self.logger.info("[%s] %s on %s (ID: %s) - %s", ip or "N/A", operation, table, record_id, details)

    def close(self) -> None:
        if self._handler is not None:
            self.logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None
