"""Switch the console to text mode."""

import os
import sys
from importlib import metadata

from kbdtools.kd import DisplayMode, open_console, set_display_mode

PROGRAM = "totextmode"


def _version() -> str:
    try:
        return metadata.version("kbdtools")
    except metadata.PackageNotFoundError:
        return "unknown"


def _fail(message: str) -> None:
    print(f"{PROGRAM}: {message}", file=sys.stderr)
    raise SystemExit(1)


def main(argv=None) -> int:
    """Run the totextmode command."""
    args = sys.argv[1:] if argv is None else list(argv)

    if args == ["-V"]:
        print(f"{PROGRAM} from kbdtools {_version()}")
        return 0

    if len(args) != 1:
        _fail(f"Usage: {PROGRAM} [option...]\n")

    try:
        fd = open_console(None)
    except OSError:
        _fail("Couldn't get a file descriptor referring to the console.")

    try:
        set_display_mode(fd, DisplayMode.TEXT)
    except OSError as exc:
        _fail(f"totextmode: KDSETMODE: {os.strerror(exc.errno or 0)}")
    finally:
        os.close(fd)
    return 0


if __name__ == "__main__":
    sys.exit(main())