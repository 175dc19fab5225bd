"""
types.py
Dataclasses used across modules: ToolConfig, RunConfig, Artifacts, Step, StepResult.

RunConfig is built once by the CLI and never mutated afterwards.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from .codes import EXIT_STEP_FAILED

PACK = "pack"
UNPACK = "unpack"


@dataclass(frozen=True)
class ToolConfig:
    # tools
    archiver: str = "tar"
    encryptor: str = "gpg"
    checksum: str = "sha1sum"
    parity: str = "par2"
    # encryption
    cipher: str = "AES256"
    compress_algo: str = "zlib"
    gpg_extra_args: Tuple[str, ...] = ()
    # directory searched before PATH for the four tools
    bin_dir: Optional[str] = None
    # parity
    redundancy: int = 10


@dataclass(frozen=True)
class Artifacts:
    workdir: Path
    name: str

    @property
    def tar(self) -> Path:
        return self.workdir / f"{self.name}.tar"

    @property
    def bundle(self) -> Path:
        return self.workdir / f"{self.name}.tar.gpg"

    @property
    def checksum(self) -> Path:
        return self.workdir / f"{self.name}.tar.gpg.sha1"

    @property
    def parity(self) -> Path:
        return self.workdir / f"{self.name}.tar.gpg.par2"


@dataclass(frozen=True)
class RunConfig:
    action: str
    target: Path
    name: str
    redundancy: int
    delete_source: bool
    verbose: bool
    dry_run: bool
    workdir: Path
    tools: ToolConfig = field(default_factory=ToolConfig)

    @property
    def artifacts(self) -> Artifacts:
        return Artifacts(self.workdir, self.name)

    @property
    def extracted_tar(self) -> Path:
        """Decrypted tar file, placed inside the target so extraction is relative to it."""
        return self.target / f"{self.name}.tar"


@dataclass(frozen=True)
class Step:
    name: str
    action: Callable[[RunConfig], bool]
    exit_code: int = EXIT_STEP_FAILED
    hint: Optional[str] = None


@dataclass
class StepResult:
    ok: bool
    exit_code: int
    failed_step: Optional[str] = None
    hint: Optional[str] = None
    completed: List[str] = field(default_factory=list)
