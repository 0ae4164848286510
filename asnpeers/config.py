"""
asnpeers - Configuration

Settings come from an optional .env file and the process environment.
Explicit arguments (CLI flags) take priority over both. The result is a
frozen Config built once at startup and passed down the pipeline.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from asnpeers.errors import ConfigError, ConfigWarning
from asnpeers.log import get_logger

log = get_logger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# DEFAULTS
# ═══════════════════════════════════════════════════════════════════════════════

DEFAULT_RPC_URL = "http://localhost:26657"
DEFAULT_ASN_API_URL = "https://api.iptoasn.com/v1/as/ip"
DEFAULT_TIMEOUT = 10    # Seconds per HTTP request
DEFAULT_WORKERS = 1     # Sequential lookups
DEFAULT_ENV_FILE = ".env"

ENV_RPC_URL = "RPC_URL"
ENV_ASN_API_URL = "ASN_API_URL"
ENV_TIMEOUT = "ASNPEERS_TIMEOUT"
ENV_WORKERS = "ASNPEERS_WORKERS"

NET_INFO_PATH = "/net_info"


def net_info_url(base_url: str) -> str:
    """<base_url>/net_info, tolerant of a trailing slash on the base"""
    return base_url.rstrip('/') + NET_INFO_PATH


@dataclass(frozen=True)
class Config:
    rpc_url: str = DEFAULT_RPC_URL
    asn_api_url: str = DEFAULT_ASN_API_URL
    timeout: float = DEFAULT_TIMEOUT
    workers: int = DEFAULT_WORKERS

    @property
    def net_info_url(self) -> str:
        return net_info_url(self.rpc_url)


# ═══════════════════════════════════════════════════════════════════════════════
# ENV FILE
# ═══════════════════════════════════════════════════════════════════════════════

def load_env_file(path: Union[str, Path]) -> dict:
    """
    Load KEY=VALUE lines from an env file into os.environ.

    Variables already set in the environment are left alone. Returns the
    pairs that were actually applied. Raises ConfigWarning when the file
    does not exist or cannot be read.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigWarning(f"cannot read {path}: {e.strerror or e}") from e

    applied = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        if line.startswith('export '):
            line = line[len('export '):].lstrip()

        key, value = line.split('=', 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key and key not in os.environ:
            os.environ[key] = value
            applied[key] = value

    log.debug("Loaded %d variable(s) from %s", len(applied), path)
    return applied


# ═══════════════════════════════════════════════════════════════════════════════
# CONFIG
# ═══════════════════════════════════════════════════════════════════════════════

def _normalize_url(url: str) -> str:
    return url.strip().rstrip('/')


def _env_number(name: str, cast, minimum):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return None
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {raw!r}")
    return value


def load_config(
        env_file: Optional[Union[str, Path]] = DEFAULT_ENV_FILE,
        rpc_url: Optional[str] = None,
        workers: Optional[int] = None,
        timeout: Optional[float] = None,
) -> Config:
    """Build the run configuration: arguments > environment > defaults"""
    if env_file:
        try:
            load_env_file(env_file)
        except ConfigWarning as w:
            log.warning("Error loading .env file, using default RPC URL (%s)", w)

    if rpc_url is None or not rpc_url.strip():
        rpc_url = os.environ.get(ENV_RPC_URL, "")
    rpc_url = _normalize_url(rpc_url) or DEFAULT_RPC_URL

    asn_api_url = _normalize_url(os.environ.get(ENV_ASN_API_URL, "")) or DEFAULT_ASN_API_URL

    if timeout is None:
        timeout = _env_number(ENV_TIMEOUT, float, 0.1)
    elif timeout <= 0:
        raise ConfigError(f"timeout must be positive, got {timeout}")

    if workers is None:
        workers = _env_number(ENV_WORKERS, int, 1)
    elif workers < 1:
        raise ConfigError(f"workers must be >= 1, got {workers}")

    config = Config(
        rpc_url=rpc_url,
        asn_api_url=asn_api_url,
        timeout=DEFAULT_TIMEOUT if timeout is None else timeout,
        workers=DEFAULT_WORKERS if workers is None else workers,
    )
    log.debug("Using %s", config)
    return config
