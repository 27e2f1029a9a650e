"""Headers of PC Screen Font (PSF) files, versions 1 and 2.

A PSF file holds a header, the glyph bitmaps and, optionally, a Unicode
table.  In a version 1 table every font position is described by
little-endian 2-byte values ended by ``PSF1_SEPARATOR``, with sequences
introduced by ``PSF1_STARTSEQ``; version 2 uses UTF-8 with the one-byte
``PSF2_SEPARATOR`` and ``PSF2_STARTSEQ`` markers instead.
"""

import struct
from dataclasses import dataclass
from typing import Union

PSF1_MAGIC = bytes((0x36, 0x04))

PSF1_MODE512 = 0x01
PSF1_MODEHASTAB = 0x02
PSF1_MODEHASSEQ = 0x04
PSF1_MAXMODE = 0x05

PSF1_SEPARATOR = 0xFFFF
PSF1_STARTSEQ = 0xFFFE

PSF2_MAGIC = bytes((0x72, 0xB5, 0x4A, 0x86))

PSF2_HAS_UNICODE_TABLE = 0x01
PSF2_MAXVERSION = 0

PSF2_SEPARATOR = 0xFF
PSF2_STARTSEQ = 0xFE

# Largest font, in bytes, that is handled.
MAXFONTSIZE = 512 * 64 * 128

_PSF1 = struct.Struct("<2sBB")
_PSF2 = struct.Struct("<4s7I")


class PsfError(ValueError):
    """Raised when data does not hold a usable PSF header."""


@dataclass(frozen=True)
class Psf1Header:
    """The 4-byte header of a version 1 font."""

    mode: int = 0
    charsize: int = 16

    size = _PSF1.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "Psf1Header":
        """Read a header from the start of ``data``."""
        if len(data) < _PSF1.size:
            raise PsfError("data too short for a PSF1 header")
        magic, mode, charsize = _PSF1.unpack_from(data)
        if magic != PSF1_MAGIC:
            raise PsfError("bad PSF1 magic")
        if mode > PSF1_MAXMODE:
            raise PsfError(f"unsupported PSF1 mode: {mode:#x}")
        return cls(mode, charsize)

    def pack(self) -> bytes:
        """Return the header as it is stored in a file."""
        return _PSF1.pack(PSF1_MAGIC, self.mode, self.charsize)

    @property
    def glyph_count(self) -> int:
        """Number of glyphs in the font."""
        return 512 if self.mode & PSF1_MODE512 else 256

    @property
    def width(self) -> int:
        """Glyph width; version 1 fonts are always 8 pixels wide."""
        return 8

    @property
    def height(self) -> int:
        """Glyph height, one byte per row."""
        return self.charsize

    @property
    def has_unicode_table(self) -> bool:
        """Whether a Unicode table follows the glyphs."""
        return bool(self.mode & PSF1_MODEHASTAB)

    @property
    def has_sequences(self) -> bool:
        """Whether the Unicode table may hold sequences."""
        return bool(self.mode & PSF1_MODEHASSEQ)


@dataclass(frozen=True)
class Psf2Header:
    """The 32-byte header of a version 2 font; integers are little endian."""

    version: int = 0
    headersize: int = _PSF2.size
    flags: int = 0
    length: int = 256
    charsize: int = 16
    height: int = 16
    width: int = 8

    size = _PSF2.size

    @classmethod
    def from_bytes(cls, data: bytes) -> "Psf2Header":
        """Read a header from the start of ``data``."""
        if len(data) < _PSF2.size:
            raise PsfError("data too short for a PSF2 header")
        magic, *fields = _PSF2.unpack_from(data)
        if magic != PSF2_MAGIC:
            raise PsfError("bad PSF2 magic")
        header = cls(*fields)
        if header.version > PSF2_MAXVERSION:
            raise PsfError(f"unsupported PSF2 version: {header.version}")
        return header

    def pack(self) -> bytes:
        """Return the header as it is stored in a file."""
        return _PSF2.pack(
            PSF2_MAGIC,
            self.version,
            self.headersize,
            self.flags,
            self.length,
            self.charsize,
            self.height,
            self.width,
        )

    @property
    def glyph_count(self) -> int:
        """Number of glyphs in the font."""
        return self.length

    @property
    def has_unicode_table(self) -> bool:
        """Whether a Unicode table follows the glyphs."""
        return bool(self.flags & PSF2_HAS_UNICODE_TABLE)


PsfHeader = Union[Psf1Header, Psf2Header]


def read_psf_header(data: bytes) -> PsfHeader:
    """Recognise and read the header of a version 1 or version 2 font."""
    if data[: len(PSF2_MAGIC)] == PSF2_MAGIC:
        return Psf2Header.from_bytes(data)
    if data[: len(PSF1_MAGIC)] == PSF1_MAGIC:
        return Psf1Header.from_bytes(data)
    raise PsfError("not a PSF font")