# kbdtools

Small utilities for the Linux text console: inspecting what the keyboard
sends, switching the console back to text mode, starting a shell or login
on a "spawn console" keypress, helpers for locking virtual terminals, and
reading PSF console font headers.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Commands

### showkey

Shows what the keyboard sends to the console.

```
showkey              # interpreted keycodes (default), e.g. "keycode  30 press"
showkey --scancodes  # raw scan codes, e.g. "0x1e 0x9e"
showkey --ascii      # decimal/octal/hex of each byte read from stdin
showkey --timeout 5  # exit 5 seconds after the last keypress (default 10)
```

In keycode and scancode mode the keyboard is switched to the needed mode
for the duration of the run and restored on exit, on timeout, or when a
signal arrives. In `--ascii` mode only stdin is read; Ctrl-D ends the
program. A timeout below 1 falls back to 10 seconds.

### totextmode

Switches the current console to text mode (undoing a program that left
it in graphics mode). It takes exactly one argument:

```
totextmode 1
```

`totextmode -V` prints the version instead.

### spawn_command

Waits for the kernel's "spawn console" signal and, each time it arrives,
runs `openvt` to start a new session on a free virtual terminal. `openvt`
must be installed.

```
spawn_command                # starts "openvt -s -l bash"
spawn_command --mode login   # starts "openvt -s -l -- login -h spawn"
```

Be careful where you start this from: anyone at the keyboard gets a new
session with a single keystroke.

## Library

The modules can also be used directly.

- `kbdtools.utf8.encode_ucs(wc)` encodes a 32-bit character value in the
  six-byte-capable UTF-8 form, including the 5- and 6-byte sequences for
  values above U+1FFFFF; values outside 0..0xFFFFFFFF raise `ValueError`.
- `kbdtools.kd` holds the console ioctl numbers and helpers:
  `KeyboardMode`, `DisplayMode`, `mode_name`, `get_keyboard_mode`,
  `set_keyboard_mode`, `set_display_mode`, `open_console`, and
  `ConsoleFontOp` for building a font operation request block.
- `kbdtools.showkey` exposes the decoding behind the command:
  `decode_keycodes` turns medium-raw bytes (including 3-byte reports for
  keycodes above 127) into `KeyEvent` values, and `format_key_event`,
  `format_scancodes` and `format_ascii` produce the printed lines.
  `parse_args` returns `ShowkeyOptions`.
- `kbdtools.spawn_command.command_for` gives the command line started for
  each `SpawnMode`.
- `kbdtools.psf` reads and writes PSF version 1 and 2 font headers:
  `read_psf_header`, `Psf1Header`, `Psf2Header`, raising `PsfError` on
  data that is not a usable PSF header.

### Locking virtual terminals

`kbdtools.vlock` holds the pieces of a VT locker:

- `options.parse_args` parses `-c/--current`, `-a/--all`, `-v/--version`
  and `-h/--help` into `LockOptions`, raising `UsageError` on unknown
  options; `locked_name` and `help_text` give the messages shown to the
  user.
- `username.get_username` finds the login name, preferring `LOGNAME` when
  it belongs to the current user, and raises `UnknownUserError` when no
  password entry matches.
- `screen.save_screen` saves the contents of the current virtual console
  from its `/dev/vcsaN` device and clears the screen;
  `SavedScreen.restore` writes it back. `vcsa_path_for` maps a device
  number to that path.
- `vt.VtLock` is a context manager that takes over VT switching (when
  locking all consoles) and ignores job-control and termination signals
  while the lock is held, restoring everything on exit.

```python
import sys

from kbdtools.vlock.options import parse_args
from kbdtools.vlock.vt import VtLock

options = parse_args(["-a"])
with VtLock("tty1", options.lock_all, sys.stderr):
    ...  # check the user's credentials here
```

## What is not included

There is no `vlock` command. The package does not check passwords or talk
to any authentication system: `VtLock` only holds the console while your
own code decides when to let the user back in. Nor does it load, save or
render console fonts; `kbdtools.psf` reads and writes font headers only.