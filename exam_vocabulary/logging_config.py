import json
import logging


def configure_logging(level: str = 'INFO') -> None:
    """Idempotent logging setup shared by the app factory and scripts."""
    root = logging.getLogger()
    if root.handlers:
        return
    numeric_level = getattr(logging, str(level or 'INFO').upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
    )


def log_event(logger, level, event, **fields):
    payload = {'event': event}
    for key, value in fields.items():
        payload[str(key)] = value
    logger.log(level, json.dumps(payload, ensure_ascii=True, default=str))
