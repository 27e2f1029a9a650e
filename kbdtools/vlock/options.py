"""Command line options of the console locking program."""

import getopt
import sys
from dataclasses import dataclass
from importlib import metadata

PROGRAM = "vlock"
EX_USAGE = 64


class UsageError(Exception):
    """Raised when the command line holds an unknown option."""

    exit_code = EX_USAGE

    def __init__(self, program: str = PROGRAM):
        super().__init__(f"Try `{program} --help' for more information.")
        self.program = program


@dataclass
class LockOptions:
    """What to lock: the current console only, or all of them."""

    lock_all: bool = False


def _version() -> str:
    try:
        return metadata.version("kbdtools")
    except metadata.PackageNotFoundError:
        return "unknown"


def locked_name(lock_all: bool, is_vt: bool) -> str:
    """Return the name of what is locked, as used in messages and logs."""
    if lock_all:
        return "console"
    return "VC" if is_vt else "tty"


def help_text(program: str) -> str:
    """Return the text printed by ``--help``."""
    return (
        f"{program}: locks virtual consoles, saving your current session.\n"
        f"Usage: {program} [options]\n"
        "       Where [options] are any of:\n"
        "-c or --current: lock only this virtual console, allowing user to\n"
        "       switch to other virtual consoles.\n"
        "-a or --all: lock all virtual consoles by preventing other users\n"
        "       from switching virtual consoles.\n"
        "-v or --version: Print the version number of vlock and exit.\n"
        "-h or --help: Print this help message and exit.\n"
    )


def parse_args(argv) -> LockOptions:
    """Parse the command line.

    Help and version requests print their text and exit; an unknown
    option raises :class:`UsageError`.  Arguments that are not options
    are ignored.
    """
    try:
        pairs, _ = getopt.gnu_getopt(
            list(argv), "acvh", ["current", "all", "version", "help"]
        )
    except getopt.GetoptError as exc:
        raise UsageError(PROGRAM) from exc

    options = LockOptions()
    for flag, _value in pairs:
        if flag in ("-c", "--current"):
            options.lock_all = False
        elif flag in ("-a", "--all"):
            options.lock_all = True
        elif flag in ("-v", "--version"):
            print(_version(), file=sys.stderr)
            raise SystemExit(0)
        elif flag in ("-h", "--help"):
            sys.stdout.write(help_text(PROGRAM))
            raise SystemExit(0)
    return options