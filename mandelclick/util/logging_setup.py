import logging
import logging.handlers
import multiprocessing as mp
from typing import Optional

_LOGGER_NAME = "mandelclick"

def get_logger(suffix: Optional[str] = None) -> logging.Logger:
    if suffix:
        return logging.getLogger(f"{_LOGGER_NAME}.{suffix}")
    return logging.getLogger(_LOGGER_NAME)

class RenderLogAdapter(logging.LoggerAdapter):
    """Prefixes messages with the render they belong to, e.g. ``[depth 3 1200x900]``.

    The same fields are set on the record so file handlers can filter on them.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.update(self.extra)
        kwargs["extra"] = extra
        return f"[depth {self.extra['depth']} {self.extra['size']}] {msg}", kwargs

def get_render_logger(*, depth: int, width: int, height: int) -> RenderLogAdapter:
    return RenderLogAdapter(get_logger("render"), {"depth": depth, "size": f"{width}x{height}"})

def _build_formatter() -> logging.Formatter:
    # Renders run on the scheduler thread or in band worker processes.
    return logging.Formatter(
        fmt="%(asctime)s.%(msecs)03dZ %(processName)s/%(threadName)s %(levelname)s %(name)s - %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

def _reset_handlers(logger: logging.Logger, level: int) -> None:
    logger.setLevel(level)
    logger.propagate = False
    for h in list(logger.handlers):
        logger.removeHandler(h)

def configure_root_logging(
    *,
    level: int = logging.INFO,
    console: bool = True,
    log_file: Optional[str] = "mandelclick.log",
    rotate_bytes: int = 2 * 1024 * 1024,
    rotate_count: int = 3,
) -> logging.Logger:
    logger = get_logger()
    _reset_handlers(logger, level)
    fmt = _build_formatter()
    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
        ))
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(fmt)
        logger.addHandler(h)
    return logger

def create_log_queue() -> mp.Queue:
    return mp.Queue(-1)

def start_queue_listener(queue: mp.Queue, listener_logger: logging.Logger) -> logging.handlers.QueueListener:
    listener = logging.handlers.QueueListener(queue, *listener_logger.handlers, respect_handler_level=True)
    listener.start()
    return listener

def logging_initialiser(queue: mp.Queue, level: int) -> None:
    """Band worker setup: everything logged under ``mandelclick`` goes to the parent's queue."""
    logger = get_logger()
    _reset_handlers(logger, level)
    qh = logging.handlers.QueueHandler(queue)
    qh.setLevel(level)
    logger.addHandler(qh)
