"""
util.py
Cross-cutting utilities:
- Process execution (list of args) with dry-run and verbose echo
- PATH lookup for external tools
- Tagged console output ([info], [warn], [error], ...)
"""

from __future__ import annotations
import shlex, shutil, subprocess, sys
from pathlib import Path


def say(tag: str, msg: str) -> None:
    """Print a tagged line; warnings and errors go to stderr."""
    stream = sys.stderr if tag in ("warn", "error") else sys.stdout
    print(f"[{tag}] {msg}", file=stream)


def quote_cmd(cmd) -> str:
    return " ".join(shlex.quote(str(c)) for c in cmd)


def run(cmd, capture=False, cwd=None, dry=False, echo=False):
    """
    Execute a command given as a list of args.
    - stdin is inherited so interactive prompts (gpg passphrase) reach the terminal.
    - Returns (rc, output_str); output is only collected when capture=True.
    """
    cmd_list = [str(c) for c in cmd]
    if dry:
        print("[dry-run]", quote_cmd(cmd_list))
        return 0, ""
    if echo:
        say("run", quote_cmd(cmd_list))
    try:
        if capture:
            proc = subprocess.run(cmd_list, cwd=cwd, stdout=subprocess.PIPE)
            return proc.returncode, proc.stdout.decode("utf-8", "replace")
        proc = subprocess.run(cmd_list, cwd=cwd)
        return proc.returncode, ""
    except FileNotFoundError:
        say("error", f"command not found: {cmd_list[0]}")
        return 127, ""


def which_quiet(name: str) -> bool:
    """Check if command exists silently."""
    return bool(shutil.which(name))


def make_fresh_dir(p: Path) -> None:
    """Create p (and missing parents); p itself must not exist yet."""
    try:
        p.mkdir(parents=True, exist_ok=False)
    except FileExistsError:
        raise FileExistsError(f"Cannot create directory {p} - it already exists")
    except PermissionError:
        raise PermissionError(f"Cannot create directory {p} - insufficient permissions")
    except OSError as e:
        raise OSError(f"Cannot create directory {p}: {e}")


def is_empty_dir(p: Path) -> bool:
    return not any(p.iterdir())
