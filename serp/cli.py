#!/usr/bin/env python3
"""
cli.py
Command-line interface for serp.
Parses arguments, validates paths, loads config, checks tools and runs the
pack or unpack pipeline.
"""
from __future__ import annotations
import argparse, os, sys
from pathlib import Path
from . import __version__
from .codes import (
    EXIT_USAGE,
    EXIT_BAD_PATH,
    EXIT_MISSING_TOOL,
    EXIT_INTERNAL,
    EXIT_INTERRUPTED,
)
from .config import DEFAULT_BIN_DIR, DEFAULT_CONFIG_PATH, find_config, load_config
from .pipeline import run_pack, run_unpack
from .preflight import check_required, use_bundled_tools
from .types import PACK, UNPACK, RunConfig, ToolConfig, Artifacts
from .util import is_empty_dir


def fail(code: int, msg: str, hint: str | None = None):
    print(f"❌ Error: {msg}")
    if hint:
        print(f"💡 Hint: {hint}")
    sys.exit(code)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="serp",
        description="serp: easily create (se)cure (r)edundant (p)ackages\n"
        "directory -> tar -> gpg -> sha1sum -> par2, and back again",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="\nBundle and sidecars are written to (and read from) the current directory.",
    )
    mode = ap.add_mutually_exclusive_group(required=True)
    mode.add_argument("-p", "--pack", dest="action", action="store_const", const=PACK,
                      help="pack DIRECTORY into <name>.tar.gpg plus sidecars")
    mode.add_argument("-u", "--unpack", dest="action", action="store_const", const=UNPACK,
                      help="restore <name>.tar.gpg into the new DIRECTORY")
    ap.add_argument("-n", "--name", help="bundle basename (default: the directory's name)")
    ap.add_argument("-r", "--redundancy", type=int, default=None,
                    help="parity redundancy in percent (default: 10)")
    ap.add_argument("-d", "--delete", action="store_true",
                    help="delete DIRECTORY after a successful pack")
    ap.add_argument("-v", "--verbose", action="store_true", help="show commands and tool output")
    ap.add_argument("--dry-run", action="store_true", help="show commands without executing")
    ap.add_argument(
        "--config",
        default=None,
        help=f"path to serp.toml (default: {DEFAULT_CONFIG_PATH}, then ~/.config/serp/serp.toml, then /etc/serp.toml)",
    )
    ap.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    ap.add_argument("directory", nargs="*", help="the directory to pack or to unpack into")
    return ap


def validate_arguments(args) -> None:
    """Validate CLI arguments that do not depend on the filesystem."""
    if len(args.directory) != 1:
        fail(EXIT_USAGE, f"expected exactly one directory, got {len(args.directory)}",
             "serp --pack photos/  or  serp --unpack photos/")
    if args.redundancy is not None and args.redundancy < 0:
        fail(EXIT_USAGE, f"--redundancy must not be negative, got {args.redundancy}",
             "Try --redundancy 10 for example")
    if args.name is not None and (not args.name or os.sep in args.name):
        fail(EXIT_USAGE, f"--name must be a plain file name, got {args.name!r}")
    if args.delete and args.action == UNPACK:
        fail(EXIT_USAGE, "--delete only applies to --pack")


def target_name(raw: Path) -> str:
    """The name the user typed ('photos/' -> 'photos'); symlinks are not followed."""
    if raw.name in ("", ".", ".."):
        return raw.resolve().name
    return raw.name


def build_run_config(args, tools: ToolConfig, workdir: Path) -> RunConfig:
    raw = Path(args.directory[0]).expanduser()
    # absolute but not resolved, so a symlinked target keeps its own name
    target = Path(os.path.abspath(raw))
    name = args.name or target_name(raw)
    if not name:
        fail(EXIT_USAGE, f"cannot derive a bundle name from {args.directory[0]}",
             "Pass one with --name")
    return RunConfig(
        action=args.action,
        target=target,
        name=name,
        redundancy=args.redundancy if args.redundancy is not None else tools.redundancy,
        delete_source=args.delete,
        verbose=args.verbose,
        dry_run=args.dry_run,
        workdir=workdir,
        tools=tools,
    )


def validate_paths(cfg: RunConfig) -> None:
    """Pack needs a non-empty directory; unpack needs the bundle and a fresh target."""
    if cfg.action == PACK:
        if not cfg.target.exists():
            fail(EXIT_BAD_PATH, f"directory does not exist: {cfg.target}")
        if not cfg.target.is_dir():
            fail(EXIT_BAD_PATH, f"not a directory: {cfg.target}")
        if is_empty_dir(cfg.target):
            fail(EXIT_BAD_PATH, f"directory is empty, nothing to pack: {cfg.target}")
        if cfg.workdir.resolve().is_relative_to(cfg.target.resolve()):
            fail(EXIT_BAD_PATH,
                 f"the current directory {cfg.workdir} is inside {cfg.target}; "
                 "the bundle would be packed into itself",
                 "cd to a directory outside the one being packed")
        if cfg.delete_source and cfg.target.is_symlink():
            fail(EXIT_BAD_PATH, f"refusing --delete on a symlink: {cfg.target}",
                 "Pass the real directory, or drop --delete")
        return

    art: Artifacts = cfg.artifacts
    if not art.bundle.is_file():
        fail(EXIT_BAD_PATH, f"bundle not found: {art.bundle}",
             "Run unpack from the directory holding the bundle, or pass --name")
    if cfg.target.exists() or cfg.target.is_symlink():
        fail(EXIT_BAD_PATH, f"target already exists, refusing to overwrite: {cfg.target}",
             "Pick a directory name that does not exist yet")


def main(argv=None) -> int:
    try:
        args = build_parser().parse_args(argv)
        validate_arguments(args)

        cfg_path = args.config
        try:
            cfg_path = find_config(args.config)
            tools = load_config(cfg_path)
        except FileNotFoundError as e:
            fail(EXIT_USAGE, str(e), "Check the path passed to --config")
        except Exception as e:
            fail(EXIT_USAGE, f"Invalid configuration file {cfg_path}: {e}")

        bin_dir = Path(tools.bin_dir).expanduser() if tools.bin_dir else DEFAULT_BIN_DIR
        tools = use_bundled_tools(tools, bin_dir)

        cfg = build_run_config(args, tools, Path.cwd())
        validate_paths(cfg)

        if not check_required(cfg.tools):
            return EXIT_MISSING_TOOL

        if cfg.action == PACK:
            return run_pack(cfg)
        return run_unpack(cfg)

    except KeyboardInterrupt:
        print(f"\n\n⚡ Interrupted by user. Partial files are left in place.")
        return EXIT_INTERRUPTED
    except Exception as e:
        print(f"❌ Unexpected error: {e}")
        print(f"💡 Hint: Run with --verbose or --dry-run to see the commands involved")
        return EXIT_INTERNAL


if __name__ == "__main__":
    sys.exit(main())
