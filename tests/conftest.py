"""
Pytest configuration and shared fixtures.

The pipelines are exercised against stand-ins for gpg and par2 (shell scripts put
first on PATH) while tar and sha1sum are the real tools.
"""
import os
import shutil
import stat
from pathlib import Path

import pytest

from serp.types import RunConfig, ToolConfig


FAKE_GPG = r"""#!/bin/sh
# rot13 "cipher": same transform both ways, keeps byte count
echo "gpg $*" >> "$SERP_STUB_LOG"
[ -n "$FAKE_GPG_FAIL" ] && exit 2
out=""
while [ $# -gt 1 ]; do
  case "$1" in
    -o) out="$2"; shift 2 ;;
    *) shift ;;
  esac
done
tr 'A-Za-z' 'N-ZA-Mn-za-m' < "$1" > "$out"
"""

FAKE_PAR2 = r"""#!/bin/sh
echo "par2 $*" >> "$SERP_STUB_LOG"
[ -n "$FAKE_PAR2_FAIL" ] && exit 1
shift
files=""
for a in "$@"; do
  case "$a" in
    -*) ;;
    *) files="$files $a" ;;
  esac
done
set -- $files
[ -f "$2" ] || exit 1
echo "index for $2" > "$1"
echo "recovery for $2" > "${1%.par2}.vol00+01.par2"
"""

needs_coreutils = pytest.mark.skipif(
    not (shutil.which("tar") and shutil.which("sha1sum")),
    reason="tar and sha1sum are required",
)


def _write_exe(path: Path, body: str) -> None:
    path.write_text(body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture
def stub_log(tmp_path):
    return tmp_path / "calls.log"


@pytest.fixture
def stub_tools(tmp_path, monkeypatch, stub_log):
    """Put fake gpg/par2 first on PATH; returns the bin directory."""
    bindir = tmp_path / "stubbin"
    bindir.mkdir()
    _write_exe(bindir / "gpg", FAKE_GPG)
    _write_exe(bindir / "par2", FAKE_PAR2)
    monkeypatch.setenv("PATH", f"{bindir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("SERP_STUB_LOG", str(stub_log))
    monkeypatch.delenv("FAKE_GPG_FAIL", raising=False)
    monkeypatch.delenv("FAKE_PAR2_FAIL", raising=False)
    # keep the user's own serp.toml out of the picture
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    return bindir


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Current directory for bundles and sidecars."""
    d = tmp_path / "work"
    d.mkdir()
    monkeypatch.chdir(d)
    return d


@pytest.fixture
def source_tree(tmp_path):
    """A small directory tree with nested files, an empty dir and binary data."""
    root = tmp_path / "src" / "photos"
    (root / "2024" / "summer").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "readme.txt").write_text("holiday pictures\n")
    (root / "2024" / "summer" / "beach.jpg").write_bytes(bytes(range(256)) * 40)
    (root / "2024" / "notes.md").write_text("# Notes\nSun, sea and sand.\n")
    return root


def _snapshot(root: Path) -> dict:
    out = {}
    for p in sorted(root.rglob("*")):
        rel = p.relative_to(root).as_posix()
        out[rel] = p.read_bytes() if p.is_file() else None
    return out


@pytest.fixture
def snapshot():
    """Relative path -> bytes for files, None for directories."""
    return _snapshot


@pytest.fixture
def make_run_config():
    def _make(action, target, workdir, name=None, **kw):
        fields = dict(
            action=action,
            target=Path(target),
            name=name or Path(target).name,
            redundancy=10,
            delete_source=False,
            verbose=False,
            dry_run=False,
            workdir=Path(workdir),
            tools=ToolConfig(),
        )
        fields.update(kw)
        return RunConfig(**fields)
    return _make
