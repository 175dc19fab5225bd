"""
preflight.py
Dependency checks run before anything touches the filesystem.
The archiver, encryptor and checksum tool are always required; the parity tool
is only needed to pack, so the pack pipeline checks it as its first step.
Tools shipped in a bin/ directory (next to main.py, or tools.bin_dir) win over PATH.
"""

from __future__ import annotations
import dataclasses, os
from pathlib import Path
from typing import List, Tuple
from .types import ToolConfig
from .util import which_quiet

# default binary -> (what it is used for, apt package)
PACKAGES = {
    "tar": ("archiving", "tar"),
    "gpg": ("encryption", "gnupg"),
    "sha1sum": ("checksums", "coreutils"),
    "par2": ("parity/recovery data", "par2"),
}


TOOL_FIELDS = ("archiver", "encryptor", "checksum", "parity")


def use_bundled_tools(tools: ToolConfig, bin_dir: Path) -> ToolConfig:
    """
    Return a copy of tools where every tool that has an executable of the same
    name in bin_dir is replaced by that absolute path; the rest stay PATH lookups.
    """
    if not bin_dir.is_dir():
        return tools
    found = {}
    for field in TOOL_FIELDS:
        name = getattr(tools, field)
        candidate = bin_dir / name
        if os.sep not in name and candidate.is_file() and os.access(candidate, os.X_OK):
            found[field] = str(candidate)
    return dataclasses.replace(tools, **found) if found else tools


def required_tools(tools: ToolConfig) -> List[str]:
    return [tools.archiver, tools.encryptor, tools.checksum]


def missing_tools(names: List[str]) -> List[str]:
    return [n for n in names if not which_quiet(n)]


def install_hints(missing: List[str]) -> List[Tuple[str, str]]:
    """Return (tool, hint) pairs for the missing tools."""
    hints = []
    for tool in missing:
        desc, package = PACKAGES.get(tool, (None, None))
        if package:
            hints.append((tool, f"{tool} ({desc}): sudo apt install {package}"))
        else:
            hints.append((tool, f"{tool}: not found on PATH"))
    return hints


def report_missing(missing: List[str]) -> None:
    print(f"❌ Error: required tool(s) not found: {', '.join(missing)}")
    for _, hint in install_hints(missing):
        print(f"  • {hint}")


def check_required(tools: ToolConfig) -> bool:
    missing = missing_tools(required_tools(tools))
    if missing:
        report_missing(missing)
        return False
    return True


def check_parity(tools: ToolConfig) -> bool:
    missing = missing_tools([tools.parity])
    if missing:
        report_missing(missing)
        return False
    return True
