import json
import os
import sys
from datetime import datetime

DEFAULT_LOG_FILE = "lint_log.json"

# set to override LINT_LOG_FILE
LOG_FILE = None


def log_event(event_type: str, message: str, extra: dict = None):
    """
    Logs events to a JSON file for debugging & monitoring.
    """
    entry = {
        "time": datetime.now().isoformat(),
        "type": event_type,
        "message": message
    }
    if extra:
        entry["extra"] = extra

    try:
        log_file = LOG_FILE or os.getenv("LINT_LOG_FILE", DEFAULT_LOG_FILE)
        with open(log_file, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        print(f"Log write error: {e}", file=sys.stderr)


def log_issue(issue):
    """
    Record a lint issue in the event log under its severity.
    """
    log_event(
        issue.severity.upper(),
        issue.message,
        {"path": str(issue.path), "rule": issue.rule},
    )
