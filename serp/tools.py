"""
tools.py
Command builders for the external collaborators:
- tar: pack a directory's contents (not the directory entry) and extract them again
- gpg: symmetric encryption with a fixed cipher; the passphrase is always prompted
- sha1sum: compute and verify the checksum sidecar
- par2: create recovery data; verify/repair commands are only shown to the operator
All paths handed to the checksum and parity tools are bare filenames, resolved
against the working directory, so the sidecars reference the bundle by name.
"""

from __future__ import annotations
from pathlib import Path
from typing import List
from .types import ToolConfig


def tar_create_cmd(tools: ToolConfig, src: Path, tar_path: Path, verbose: bool = False) -> List[str]:
    flags = "-cvf" if verbose else "-cf"
    return [tools.archiver, "-C", str(src), flags, str(tar_path), "."]


def tar_extract_cmd(tools: ToolConfig, dest: Path, tar_path: Path, verbose: bool = False) -> List[str]:
    flags = "-xvf" if verbose else "-xf"
    return [tools.archiver, "-C", str(dest), flags, str(tar_path)]


def gpg_encrypt_cmd(tools: ToolConfig, src: Path, out: Path) -> List[str]:
    return [
        tools.encryptor,
        *tools.gpg_extra_args,
        "--symmetric",
        "--cipher-algo",
        tools.cipher,
        "--compress-algo",
        tools.compress_algo,
        "-o",
        str(out),
        str(src),
    ]


def gpg_decrypt_cmd(tools: ToolConfig, src: Path, out: Path) -> List[str]:
    return [tools.encryptor, *tools.gpg_extra_args, "-o", str(out), "--decrypt", str(src)]


def checksum_cmd(tools: ToolConfig, bundle_name: str) -> List[str]:
    return [tools.checksum, bundle_name]


def checksum_verify_cmd(tools: ToolConfig, sidecar_name: str, verbose: bool = False) -> List[str]:
    cmd = [tools.checksum, "-c", sidecar_name]
    if not verbose:
        cmd.insert(2, "--quiet")
    return cmd


def parity_create_cmd(
    tools: ToolConfig, par2_name: str, bundle_name: str, redundancy: int, verbose: bool = False
) -> List[str]:
    """One recovery set, one volume file (-n1), redundancy passed through as given."""
    cmd = [tools.parity, "create", f"-r{redundancy}", "-n1", par2_name, bundle_name]
    if not verbose:
        cmd.insert(2, "-q")
    return cmd


def repair_hint(tools: ToolConfig, par2_name: str) -> str:
    return (
        f"Run '{tools.parity} verify {par2_name}' and, if needed, "
        f"'{tools.parity} repair {par2_name}', then re-run unpack."
    )
