"""
config.py
Load tool configuration from TOML (Python 3.11+ tomllib).
Search order:
  1) explicit --config path (must exist)
  2) serp.toml in the project root (next to main.py)
  3) $XDG_CONFIG_HOME/serp/serp.toml (default ~/.config/serp/serp.toml)
  4) /etc/serp.toml
If none exists the built-in defaults are used.
"""

from __future__ import annotations
import os
import tomllib
from pathlib import Path
from typing import Any, Dict
from .types import ToolConfig

PROJECT_DIR = Path(__file__).resolve().parent.parent
DEFAULT_CONFIG_PATH: str = str(PROJECT_DIR / "serp.toml")
DEFAULT_BIN_DIR: Path = PROJECT_DIR / "bin"


def _gv(d: Dict[str, Any], path: list[str], default=None):
    cur = d
    for k in path:
        if not isinstance(cur, dict) or k not in cur:
            return default
        cur = cur[k]
    return cur


def _load_toml(path: Path) -> Dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def user_config_path() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / "serp" / "serp.toml"


def find_config(path_arg: str | None) -> Path | None:
    """Pick the config path based on CLI arg and availability; None means defaults."""
    if path_arg:
        p = Path(path_arg)
        if not p.exists():
            raise FileNotFoundError(f"Specified config file does not exist: {path_arg}")
        return p

    for p in (Path(DEFAULT_CONFIG_PATH), user_config_path(), Path("/etc/serp.toml")):
        if p.exists():
            return p
    return None


def load_config(path: Path | None) -> ToolConfig:
    if path is None:
        return ToolConfig()
    cfg = _load_toml(path)
    defaults = ToolConfig()

    def gv(keys, default=None):
        return _gv(cfg, keys, default)

    extra = gv(["encryption", "extra_args"], [])
    if not isinstance(extra, list) or not all(isinstance(x, str) for x in extra):
        raise ValueError("encryption.extra_args must be a list of strings")

    return ToolConfig(
        archiver=str(gv(["tools", "archiver"], defaults.archiver)),
        encryptor=str(gv(["tools", "encryptor"], defaults.encryptor)),
        checksum=str(gv(["tools", "checksum"], defaults.checksum)),
        parity=str(gv(["tools", "parity"], defaults.parity)),
        cipher=str(gv(["encryption", "cipher"], defaults.cipher)),
        compress_algo=str(gv(["encryption", "compress_algo"], defaults.compress_algo)),
        gpg_extra_args=tuple(extra),
        bin_dir=gv(["tools", "bin_dir"], defaults.bin_dir),
        redundancy=int(gv(["parity", "redundancy"], defaults.redundancy)),
    )
