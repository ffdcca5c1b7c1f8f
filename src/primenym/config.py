"""
Configuration for Primenym.

On macOS: Uses Keychain for secure API key storage.
On other platforms: Falls back to config file.

RapidAPI key lookup order:
1. macOS Keychain (if on macOS)
2. Environment variable (RAPIDAPI_KEY)
3. Config file (fallback)

There is no built-in default key. Without one the Domainr provider is
disabled and lookups go straight to the DNS fallback.
"""

import json
import logging
import os
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path

from .cache import DEFAULT_TTL
from .labels import normalize_extension

# Keychain service name
KEYCHAIN_SERVICE = "primenym.rapidapi"
KEYCHAIN_ACCOUNT = "rapidapi"

API_KEY_ENV = "RAPIDAPI_KEY"
CONFIG_KEY_NAME = "rapidapi_key"

DEFAULT_EXTENSIONS = [".com", ".io", ".net", ".co", ".ai", ".org", ".dev", ".app"]
DEFAULT_HTTP_TIMEOUT = 10.0

_FALSE_VALUES = ("0", "false", "no", "off")


def _is_macos() -> bool:
    """Check if running on macOS."""
    return sys.platform == "darwin"


def _keychain_get(service: str, account: str) -> str | None:
    """Get a password from macOS Keychain."""
    try:
        result = subprocess.run(
            ["security", "find-generic-password", "-s", service, "-a", account, "-w"],
            capture_output=True,
            text=True
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except (subprocess.SubprocessError, FileNotFoundError):
        pass
    return None


def _keychain_set(service: str, account: str, password: str) -> bool:
    """Store a password in macOS Keychain."""
    try:
        # -U updates an existing item in place
        result = subprocess.run(
            ["security", "add-generic-password", "-s", service, "-a", account, "-w", password, "-U"],
            capture_output=True
        )
        return result.returncode == 0
    except (subprocess.SubprocessError, FileNotFoundError):
        return False


def get_config_dir() -> Path:
    """Get the config directory for this app."""
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    else:  # macOS, Linux
        base = Path(os.environ.get('XDG_CONFIG_HOME', Path.home() / '.config'))

    return base / 'primenym'


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / 'config.json'


def load_config() -> dict:
    """Read the JSON config file, or {} if it is missing or unreadable."""
    config_file = get_config_file()
    try:
        if config_file.exists():
            config = json.loads(config_file.read_text())
            if isinstance(config, dict):
                return config
    except (json.JSONDecodeError, OSError):
        pass
    return {}


def get_rapidapi_key() -> str | None:
    """
    Get the RapidAPI key used for Domainr lookups.

    Lookup order:
    1. macOS Keychain (if on macOS)
    2. Environment variable (RAPIDAPI_KEY)
    3. Config file
    """
    if _is_macos():
        if key := _keychain_get(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT):
            return key

    if key := os.environ.get(API_KEY_ENV):
        return key

    if key := load_config().get(CONFIG_KEY_NAME):
        return key

    return None


def set_rapidapi_key(key: str) -> bool:
    """
    Store the RapidAPI key.

    On macOS: Uses Keychain.
    On other platforms: Uses config file.
    """
    if _is_macos():
        return _keychain_set(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT, key)

    try:
        config_dir = get_config_dir()
        config_dir.mkdir(parents=True, exist_ok=True)

        config = load_config()
        config[CONFIG_KEY_NAME] = key
        get_config_file().write_text(json.dumps(config, indent=2))
        return True
    except OSError:
        return False


def get_key_source() -> str | None:
    """Determine where the API key is stored (for display purposes)."""
    if _is_macos():
        if _keychain_get(KEYCHAIN_SERVICE, KEYCHAIN_ACCOUNT):
            return "macOS Keychain"

    if os.environ.get(API_KEY_ENV):
        return "environment variable"

    if load_config().get(CONFIG_KEY_NAME):
        return "config file"

    return None


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        parsed = float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return parsed


def _env_extensions(name: str) -> list[str]:
    value = os.environ.get(name)
    if not value:
        return DEFAULT_EXTENSIONS.copy()

    extensions = [normalize_extension(e) for e in value.split(",")]
    extensions = [e for e in extensions if e]
    return list(dict.fromkeys(extensions)) or DEFAULT_EXTENSIONS.copy()


@dataclass
class Settings:
    """Everything a resolver needs to be built."""

    api_key: str | None = None
    cache_ttl: float = DEFAULT_TTL
    extensions: list[str] = field(default_factory=lambda: DEFAULT_EXTENSIONS.copy())
    dns_fallback: bool = True
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    debug: bool = False


def load_settings() -> Settings:
    """Build Settings from the key store and PRIMENYM_* environment variables."""
    fallback = os.environ.get("PRIMENYM_DNS_FALLBACK", "1").strip().lower()
    return Settings(
        api_key=get_rapidapi_key(),
        cache_ttl=_env_float("PRIMENYM_CACHE_TTL", DEFAULT_TTL),
        extensions=_env_extensions("PRIMENYM_EXTENSIONS"),
        dns_fallback=fallback not in _FALSE_VALUES,
        http_timeout=_env_float("PRIMENYM_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT),
        debug=debug_enabled(),
    )


def debug_enabled() -> bool:
    return bool(os.environ.get("PRIMENYM_DEBUG"))


def configure_http_logging(debug: bool) -> None:
    """
    Quiet httpx/httpcore request logging unless debugging.

    Request lines include query strings and headers can carry the RapidAPI key.
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.getLogger("httpx").setLevel(level)
    logging.getLogger("httpcore").setLevel(level)
