# unified_cli.py
import sys
import importlib
import inspect
from typing import Sequence, List, Optional

PROG = "ascii-mosaic"

COMMANDS = {
    "export": ("ascii_mosaic.export_ascii", "save ascii-art.txt / ascii-art.html"),
    "image": ("ascii_mosaic.image_to_ascii", "print an image as ASCII art or write it to a file"),
}


def usage(file=None) -> None:
    file = file or sys.stdout
    print(f"Usage: {PROG} <command> [args...]", file=file)
    print("Commands:", file=file)
    for name in sorted(COMMANDS):
        print(f"  {name:<8} {COMMANDS[name][1]}", file=file)
    print(f"Run '{PROG} <command> --help' for command options.", file=file)


def _call_entry(entry, argv: List[str], module_prog: Optional[str] = None) -> int:
    try:
        if inspect.signature(entry).parameters:
            return entry(argv)

        # Entry parses sys.argv itself.
        old_argv = list(sys.argv)
        try:
            sys.argv = [module_prog or old_argv[0]] + list(argv)
            return entry()
        finally:
            sys.argv = old_argv
    except SystemExit as se:
        code = se.code
        return code if isinstance(code, int) else 0
    except Exception as e:
        print(f"Error running command: {e}", file=sys.stderr)
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)

    if not argv or argv[0] in ("-h", "--help"):
        usage()
        return 0
    if argv[0] == "--version":
        from . import __version__

        print(f"{PROG} {__version__}")
        return 0

    cmd, *args = argv
    if cmd not in COMMANDS:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        usage(sys.stderr)
        return 2
    module_path = COMMANDS[cmd][0]

    try:
        module = importlib.import_module(module_path)
    except Exception as e:
        print(f"Failed to import command '{cmd}' ({module_path}): {e}", file=sys.stderr)
        return 3

    entry = getattr(module, "main", None)
    if not callable(entry):
        print(f"Command module '{module_path}' has no callable 'main'", file=sys.stderr)
        return 4

    return _call_entry(entry, args, module_prog=f"{PROG} {cmd}")


if __name__ == "__main__":
    raise SystemExit(main())
