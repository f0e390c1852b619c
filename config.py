# postlint/config.py
import json
import os
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CONFIG_FILE = "postlint.json"

DEFAULTS = {
    "posts_dir": "_posts",
    "extensions": [".md", ".markdown"],
    "layouts": ["post"],
    "check_links": False,
    "link_timeout": 10,
    "link_workers": 8,
    "report_path": None,
}

ENV_OVERRIDES = {
    "POSTS_DIR": ("posts_dir", str),
    "LINK_CHECK_TIMEOUT": ("link_timeout", float),
    "LINK_CHECK_WORKERS": ("link_workers", int),
}


def load_config(config_path: str = None) -> dict:
    """
    Load linter configuration from defaults, a JSON file and the environment.

    An explicit config_path must exist; the default postlint.json is optional.
    """
    load_dotenv(Path.cwd() / ".env")
    config = dict(DEFAULTS)

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = Path(DEFAULT_CONFIG_FILE)

    if path.exists():
        with path.open("r", encoding="utf-8") as f:
            overrides = json.load(f)
        if not isinstance(overrides, dict):
            raise ValueError(f"Config file must contain a JSON object: {path}")
        config.update(overrides)

    for env_name, (key, cast) in ENV_OVERRIDES.items():
        value = os.getenv(env_name)
        if value:
            try:
                config[key] = cast(value)
            except ValueError:
                raise ValueError(f"Invalid value for {env_name}: {value!r}")

    required_keys = ["posts_dir", "extensions", "layouts"]

    for key in required_keys:
        if key not in config or not config[key]:
            raise ValueError(f"Missing required config key: {key}")

    if not isinstance(config["posts_dir"], str):
        raise ValueError("Config key posts_dir must be a string")

    for key in ("extensions", "layouts"):
        value = config[key]
        if not isinstance(value, list) or not all(isinstance(v, str) and v for v in value):
            raise ValueError(f"Config key {key} must be a list of non-empty strings")

    if not isinstance(config["check_links"], bool):
        raise ValueError("Config key check_links must be true or false")

    for key in ("link_timeout", "link_workers"):
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ValueError(f"Config key {key} must be a positive number")

    if config["report_path"] is not None and not isinstance(config["report_path"], str):
        raise ValueError("Config key report_path must be a string")

    return config
