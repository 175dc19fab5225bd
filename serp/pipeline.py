"""
pipeline.py
Pack and unpack as linear step lists:
  pack:   check parity tool -> tar -> gpg -> rm tar -> sha1sum -> par2 [-> rm source]
  unpack: sha1sum -c -> mkdir -> gpg -d -> tar -x -> rm tar
Each step returns True/False. run_steps() stops at the first failure and reports
which step failed; nothing is retried or rolled back. Deleting the source after a
pack is a terminal best-effort step outside the chain.
"""

from __future__ import annotations
import shutil
from typing import List
from .codes import EXIT_OK, EXIT_CHECKSUM, EXIT_MISSING_TOOL, EXIT_MKDIR
from .types import RunConfig, Step, StepResult
from .preflight import check_parity
from .tools import (
    tar_create_cmd,
    tar_extract_cmd,
    gpg_encrypt_cmd,
    gpg_decrypt_cmd,
    checksum_cmd,
    checksum_verify_cmd,
    parity_create_cmd,
    repair_hint,
)
from .util import run, say, quote_cmd, make_fresh_dir


def _exec(cfg: RunConfig, cmd) -> bool:
    rc, _ = run(cmd, cwd=cfg.workdir, dry=cfg.dry_run, echo=cfg.verbose)
    if rc != 0:
        say("error", f"{cmd[0]} exited with status {rc}")
    return rc == 0


def _remove(cfg: RunConfig, path) -> bool:
    if cfg.dry_run:
        print("[dry-run]", f"rm {path}")
        return True
    try:
        path.unlink()
    except OSError as e:
        say("error", f"cannot remove {path}: {e}")
        return False
    return True


# ---- pack steps ----

def step_check_parity(cfg: RunConfig) -> bool:
    return check_parity(cfg.tools)


def step_archive(cfg: RunConfig) -> bool:
    art = cfg.artifacts
    return _exec(cfg, tar_create_cmd(cfg.tools, cfg.target, art.tar, cfg.verbose))


def step_encrypt(cfg: RunConfig) -> bool:
    art = cfg.artifacts
    return _exec(cfg, gpg_encrypt_cmd(cfg.tools, art.tar, art.bundle))


def step_remove_tar(cfg: RunConfig) -> bool:
    return _remove(cfg, cfg.artifacts.tar)


def step_checksum(cfg: RunConfig) -> bool:
    art = cfg.artifacts
    cmd = checksum_cmd(cfg.tools, art.bundle.name)
    if cfg.dry_run:
        print("[dry-run]", f"{quote_cmd(cmd)} > {art.checksum.name}")
        return True
    rc, out = run(cmd, capture=True, cwd=cfg.workdir, echo=cfg.verbose)
    if rc != 0 or not out.strip():
        say("error", f"{cmd[0]} exited with status {rc}")
        return False
    try:
        art.checksum.write_text(out)
    except OSError as e:
        say("error", f"cannot write {art.checksum}: {e}")
        return False
    return True


def step_parity(cfg: RunConfig) -> bool:
    art = cfg.artifacts
    return _exec(
        cfg,
        parity_create_cmd(
            cfg.tools, art.parity.name, art.bundle.name, cfg.redundancy, cfg.verbose
        ),
    )


def pack_steps(cfg: RunConfig) -> List[Step]:
    return [
        Step("check parity tool", step_check_parity, exit_code=EXIT_MISSING_TOOL),
        Step("archive", step_archive),
        Step("encrypt", step_encrypt),
        Step("remove plaintext tar", step_remove_tar),
        Step("checksum", step_checksum),
        Step("parity", step_parity),
    ]


def delete_source(cfg: RunConfig) -> bool:
    """Best-effort removal of the packed directory; failures only warn."""
    if cfg.dry_run:
        print("[dry-run]", f"rm -r {cfg.target}")
        return True
    try:
        shutil.rmtree(cfg.target)
    except OSError as e:
        say("warn", f"could not delete source directory {cfg.target}: {e}")
        return False
    say("info", f"deleted source directory {cfg.target}")
    return True


# ---- unpack steps ----

def step_verify_checksum(cfg: RunConfig) -> bool:
    art = cfg.artifacts
    if not art.checksum.exists():
        say("warn", f"no checksum file {art.checksum.name}; skipping verification")
        return True
    return _exec(cfg, checksum_verify_cmd(cfg.tools, art.checksum.name, cfg.verbose))


def step_make_target(cfg: RunConfig) -> bool:
    if cfg.dry_run:
        print("[dry-run]", f"mkdir -p {cfg.target}")
        return True
    try:
        make_fresh_dir(cfg.target)
    except OSError as e:
        say("error", str(e))
        return False
    return True


def step_decrypt(cfg: RunConfig) -> bool:
    return _exec(cfg, gpg_decrypt_cmd(cfg.tools, cfg.artifacts.bundle, cfg.extracted_tar))


def step_extract(cfg: RunConfig) -> bool:
    return _exec(cfg, tar_extract_cmd(cfg.tools, cfg.target, cfg.extracted_tar, cfg.verbose))


def step_remove_extracted_tar(cfg: RunConfig) -> bool:
    return _remove(cfg, cfg.extracted_tar)


def unpack_steps(cfg: RunConfig) -> List[Step]:
    art = cfg.artifacts
    return [
        Step(
            "verify checksum",
            step_verify_checksum,
            exit_code=EXIT_CHECKSUM,
            hint=f"{art.bundle.name} may be damaged. "
            + repair_hint(cfg.tools, art.parity.name),
        ),
        Step("create target directory", step_make_target, exit_code=EXIT_MKDIR),
        Step("decrypt", step_decrypt),
        Step("extract", step_extract),
        Step("remove decrypted tar", step_remove_extracted_tar),
    ]


# ---- runner ----

def run_steps(cfg: RunConfig, steps: List[Step]) -> StepResult:
    completed: List[str] = []
    for step in steps:
        if cfg.verbose:
            say("info", f"{step.name}...")
        if not step.action(cfg):
            say("error", f"step '{step.name}' failed")
            return StepResult(
                ok=False,
                exit_code=step.exit_code,
                failed_step=step.name,
                hint=step.hint,
                completed=completed,
            )
        completed.append(step.name)
    return StepResult(ok=True, exit_code=EXIT_OK, completed=completed)


def _report_failure(result: StepResult) -> None:
    if result.hint:
        print(f"💡 Hint: {result.hint}")


def run_pack(cfg: RunConfig) -> int:
    say("info", f"packing {cfg.target} -> {cfg.artifacts.bundle.name}")
    result = run_steps(cfg, pack_steps(cfg))
    if not result.ok:
        _report_failure(result)
        return result.exit_code
    if cfg.delete_source:
        delete_source(cfg)
    art = cfg.artifacts
    say("ok", f"created {art.bundle.name}, {art.checksum.name}, {art.parity.name}")
    return EXIT_OK


def run_unpack(cfg: RunConfig) -> int:
    say("info", f"unpacking {cfg.artifacts.bundle.name} -> {cfg.target}")
    result = run_steps(cfg, unpack_steps(cfg))
    if not result.ok:
        _report_failure(result)
        return result.exit_code
    say("ok", f"restored {cfg.target}")
    return EXIT_OK
