import logging
import sys

from airline_ops.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Attach a stdout handler to the ``airline_ops`` logger tree (idempotent)."""
    root = logging.getLogger("airline_ops")
    resolved = (level or settings.log_level).upper()
    root.setLevel(getattr(logging, resolved, logging.INFO))
    if any(getattr(h, "_airline_ops", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._airline_ops = True  # type: ignore[attr-defined]
    root.addHandler(handler)
