"""Settings for talking to a cluster.

Precedence, highest first: explicit TOML file, ``EBALTS_*`` environment
variables, the Solana CLI ``config.yml``, then built-in defaults.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

CLUSTER_URLS: Dict[str, str] = {
    "localnet": "http://127.0.0.1:8899",
    "devnet": "https://api.devnet.solana.com",
    "mainnet": "https://api.mainnet-beta.solana.com",
}

COMMITMENTS = {"processed", "confirmed", "finalized"}

DEFAULT_RPC_URL = CLUSTER_URLS["localnet"]
DEFAULT_COMMITMENT = "confirmed"


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    commitment: str = DEFAULT_COMMITMENT


def _load_toml(path: Path) -> Dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ImportError:  # pragma: no cover
        import tomli as tomllib  # type: ignore
    return tomllib.loads(path.read_text())


def load_solana_cli_config(env: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    env = os.environ if env is None else env
    path = env.get("SOLANA_CONFIG") or env.get("SOLANA_CONFIG_FILE")
    if path:
        cfg_path = Path(path)
    else:
        cfg_path = Path.home() / ".config" / "solana" / "cli" / "config.yml"
    try:
        text = cfg_path.read_text()
    except OSError:
        return {}
    cfg: Dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        value = value.strip().strip("\"'")
        if key:
            cfg[key] = value
    return cfg


def resolve_rpc_url(value: str) -> str:
    text = value.strip()
    return CLUSTER_URLS.get(text.lower(), text)


def parse_commitment(value: str) -> str:
    text = value.strip().lower()
    if text not in COMMITMENTS:
        raise ValueError("commitment must be processed, confirmed, or finalized")
    return text


def load_settings(
    path: str | Path | None = None,
    env: Optional[Mapping[str, str]] = None,
) -> Settings:
    env = os.environ if env is None else env
    file_cfg: Dict[str, Any] = {}
    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")
        raw = _load_toml(path)
        cluster = raw.get("cluster")
        if cluster is not None and not isinstance(cluster, dict):
            raise ValueError("[cluster] must be a table")
        file_cfg = cluster or {}

    solana_cfg = load_solana_cli_config(env)

    rpc_url = file_cfg.get("rpc_url") or env.get("EBALTS_RPC_URL") or solana_cfg.get("json_rpc_url")
    if rpc_url is not None and not isinstance(rpc_url, str):
        raise ValueError("cluster.rpc_url must be a string")

    commitment = file_cfg.get("commitment") or env.get("EBALTS_COMMITMENT") or solana_cfg.get("commitment")
    if commitment is not None and not isinstance(commitment, str):
        raise ValueError("cluster.commitment must be a string")

    return Settings(
        rpc_url=resolve_rpc_url(rpc_url) if rpc_url else DEFAULT_RPC_URL,
        commitment=parse_commitment(commitment) if commitment else DEFAULT_COMMITMENT,
    )
