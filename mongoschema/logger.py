import logging
import json
import sys

from mongoschema.config import log_level_from_env

LOGGER_NAME = "mongoschema"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever sys.stderr is when a record is emitted."""
    def __init__(self):
        super().__init__(sys.stderr)

    def emit(self, record):
        self.stream = sys.stderr
        super().emit(record)


def get_logger():
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.setLevel(log_level_from_env())
    # stdout carries the schema itself
    handler = _StderrHandler()
    formatter = logging.Formatter('%(levelname)s %(message)s')
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.propagate = False
    return logger

logger = get_logger()


def set_level(level):
    logger.setLevel(level)


# Structured Log Event
def log_event(event_type: str, payload: dict, level: int = logging.INFO):
    if not logger.isEnabledFor(level):
        return
    record = {"event_type": event_type, **payload}
    logger.log(level, json.dumps(record, default=str))
