"""Command line entry point: convert an ELF executable into a DOL file."""

from __future__ import annotations

import sys
from typing import Optional, Sequence

from dolkit.dol import DolError, convert_file
from dolkit.elf import ElfError

PROG = "dolkit"


def usage(name: str) -> str:
    """The usage text for the converter, naming the program as given."""
    return "\n".join(
        [
            f"Usage: {name} [-h] [-v] [--] elf-file dol-file",
            " Convert an ELF file to a DOL file (by segments)",
            " Options:",
            "  -h    Show this help",
            "  -v    Be more verbose (twice for even more)",
        ]
    )


def _print_usage(name: str) -> None:
    print(usage(name), file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Parse arguments, run the conversion and return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)

    if not args:
        _print_usage(PROG)
        return 1

    verbosity = 0
    while args and args[0].startswith("-"):
        option = args.pop(0)
        if option == "-h":
            _print_usage(PROG)
            return 1
        if option == "-v":
            verbosity += 1
        elif option == "--":
            break
        else:
            print(f"Unrecognized option {option}", file=sys.stderr)
            _print_usage(PROG)
            return 1

    if len(args) < 2:
        _print_usage(PROG)
        return 1

    elf_file, dol_file = args[0], args[1]
    try:
        convert_file(elf_file, dol_file, verbosity)
    except (ElfError, DolError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())