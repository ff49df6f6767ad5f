"""
Logging setup for the research assistant backend.

LOG_LEVEL picks the level (default INFO); LOG_JSON=1 switches to one JSON
object per line. Messages are event-style (`analysis.request.done kind=...`),
so the JSON record keeps the raw message and adds the event name.
Never log API keys, user-supplied transcripts or note contents.
"""
import json
import logging
import os
import sys

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# libraries that log every request at INFO
NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "event": message.split(" ", 1)[0],
            "message": message,
        }
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging() -> None:
    level = getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)
    use_json = os.getenv("LOG_JSON", "").lower() in ("1", "true", "yes")

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    # uvicorn --reload imports main again; keep a single handler
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
