from pathlib import Path
from typing import Dict, Optional

CONFIG_DIR = Path.home() / ".epm"
CONFIG_FILE = CONFIG_DIR / "config"

REGISTRY_URL_KEY = "EPM_REGISTRY_URL"
REQUEST_TIMEOUT_KEY = "EPM_REQUEST_TIMEOUT"
CACHE_MAX_BYTES_KEY = "EPM_CACHE_MAX_BYTES"

DEFAULT_REGISTRY_URL = "https://epr.elastic.co"
DEFAULT_REQUEST_TIMEOUT = 60.0

def _read_config() -> Dict[str, str]:
    """read KEY=VALUE pairs from the config file. missing or unreadable files give an empty dict."""
    config = {}
    if not CONFIG_FILE.exists():
        return config

    try:
        with open(CONFIG_FILE, "r") as f:
            for line in f:
                line = line.strip()
                if "=" in line and not line.startswith("#"):
                    key, value = line.split("=", 1)
                    config[key.strip()] = value.strip()
    except (IOError, PermissionError, OSError):
        # if we can't read the file, treat as not configured
        return {}
    return config

def _write_config(config: Dict[str, str]):
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    try:
        with open(CONFIG_FILE, "w") as f:
            for key, value in config.items():
                f.write(f"{key}={value}\n")
    except (IOError, PermissionError, OSError) as e:
        raise RuntimeError(f"failed to write config file: {e}") from e

def get_registry_url() -> str:
    """get the configured registry base URL, without a trailing slash."""
    url = _read_config().get(REGISTRY_URL_KEY) or DEFAULT_REGISTRY_URL
    return url.rstrip("/")

def set_registry_url(url: str):
    """set the registry URL in the config file, preserving other config values."""
    config = _read_config()
    config[REGISTRY_URL_KEY] = url.rstrip("/")
    _write_config(config)

def get_request_timeout() -> float:
    """get the per-request timeout in seconds."""
    value = _read_config().get(REQUEST_TIMEOUT_KEY)
    if not value:
        return DEFAULT_REQUEST_TIMEOUT
    try:
        return float(value)
    except ValueError:
        return DEFAULT_REQUEST_TIMEOUT

def get_cache_max_bytes() -> Optional[int]:
    """get the content cache size limit. None means unbounded."""
    value = _read_config().get(CACHE_MAX_BYTES_KEY)
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        return None
