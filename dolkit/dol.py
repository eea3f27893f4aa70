"""Laying out and writing DOL executables from ELF program segments."""

from __future__ import annotations

import os
import struct
import sys
from dataclasses import dataclass, field
from itertools import chain
from pathlib import Path
from typing import Callable, Optional, Union

from dolkit.elf import PF_R, PF_W, PF_X, ElfImage, parse_elf, read_elf

MAX_TEXT_SEGMENTS = 7
MAX_DATA_SEGMENTS = 11
DOL_ALIGNMENT = 32

_HEADER = struct.Struct(">7I11I7I11I7I11III I28x".replace(" ", ""))
HEADER_SIZE = _HEADER.size

_MASK = 0xFFFFFFFF

Log = Callable[[str], None]


class DolError(ValueError):
    """Raised when an ELF cannot be turned into a DOL file."""


def align(value: int) -> int:
    """Round a 32-bit value up to the DOL alignment."""
    return (value + DOL_ALIGNMENT - 1) & ~(DOL_ALIGNMENT - 1) & _MASK


def _stderr(message: str) -> None:
    print(message, file=sys.stderr)


@dataclass
class Segment:
    """A TEXT or DATA segment: load address, size and where its bytes live."""

    address: int
    size: int
    elf_offset: int
    file_offset: int = 0

    @property
    def padded_size(self) -> int:
        return align(self.size)


@dataclass
class DolImage:
    """The segment map of a DOL executable."""

    entry: int = 0
    text: list[Segment] = field(default_factory=list)
    data: list[Segment] = field(default_factory=list)
    bss_address: int = 0
    bss_size: int = 0
    has_bss: bool = False

    def add_text(self, address: int, size: int, elf_offset: int) -> Segment:
        """Append a TEXT segment."""
        if len(self.text) >= MAX_TEXT_SEGMENTS:
            raise DolError("Error: Too many TEXT segments")
        segment = Segment(address, size, elf_offset)
        self.text.append(segment)
        return segment

    def add_data(self, address: int, size: int, elf_offset: int) -> Segment:
        """Append a DATA segment."""
        if len(self.data) >= MAX_DATA_SEGMENTS:
            raise DolError("Error: Too many DATA segments")
        segment = Segment(address, size, elf_offset)
        self.data.append(segment)
        return segment

    def add_bss(self, address: int, size: int) -> None:
        """Merge a zero-filled region into the single BSS range."""
        if not self.has_bss:
            self.bss_address = address
            self.bss_size = size
            self.has_bss = True
            return
        start, current = self.bss_address, self.bss_size
        if address < start:
            self.bss_address = address
        # The total reaches from the first start to the end of the furthest region.
        if (address + size) & _MASK > (start + current) & _MASK:
            self.bss_size = (address + size - start) & _MASK

    def layout(self) -> int:
        """Assign file offsets to all segments; return the resulting file size."""
        position = align(HEADER_SIZE)
        for segment in chain(self.text, self.data):
            segment.file_offset = position
            position = align(position + segment.size)
        return position

    def header_bytes(self) -> bytes:
        """The 256-byte DOL header with aligned segment sizes."""
        self.layout()

        def column(values: list[int], count: int) -> list[int]:
            return values + [0] * (count - len(values))

        dummy = [align(HEADER_SIZE)]
        text_off = column([s.file_offset for s in self.text] or dummy, MAX_TEXT_SEGMENTS)
        data_off = column([s.file_offset for s in self.data] or dummy, MAX_DATA_SEGMENTS)
        text_addr = column([s.address for s in self.text], MAX_TEXT_SEGMENTS)
        data_addr = column([s.address for s in self.data], MAX_DATA_SEGMENTS)
        text_size = column([s.padded_size for s in self.text], MAX_TEXT_SEGMENTS)
        data_size = column([s.padded_size for s in self.data], MAX_DATA_SEGMENTS)
        return _HEADER.pack(
            *text_off,
            *data_off,
            *text_addr,
            *data_addr,
            *text_size,
            *data_size,
            self.bss_address,
            self.bss_size,
            self.entry,
        )

    def to_bytes(self, elf_data: bytes) -> bytes:
        """Build the complete DOL file, copying segment bytes from the ELF data."""
        end = self.layout()
        out = bytearray(end)
        out[:HEADER_SIZE] = self.header_bytes()
        for segment in chain(self.text, self.data):
            chunk = elf_data[segment.elf_offset:segment.elf_offset + segment.size]
            if len(chunk) != segment.size:
                raise DolError("EOF while reading ELF segment data")
            out[segment.file_offset:segment.file_offset + segment.size] = chunk
        return bytes(out)


def dol_from_elf(elf: ElfImage, verbosity: int = 0, log: Optional[Log] = None) -> DolImage:
    """Map the loadable segments of an ELF image onto a laid-out DOL image."""
    emit = log or _stderr
    image = DolImage(entry=elf.entry)

    for ph in elf.program_headers:
        i = ph.index
        if not ph.is_load():
            if verbosity >= 1:
                emit(f"Skipping program header {i} of type {ph.type}")
            continue
        if not ph.memsz:
            if verbosity >= 1:
                emit(f"Skipping empty program header {i}")
            continue
        if verbosity >= 2:
            emit(
                f"PHDR {i}: 0x{ph.offset:x} [0x{ph.filesz:x}] -> 0x{ph.vaddr:08x} "
                f"[0x{ph.memsz:x}] flags 0x{ph.flags:x}"
            )
        if ph.flags & PF_X:
            if not ph.flags & PF_R:
                emit(f"Warning: non-readable segment {i}")
            if ph.flags & PF_W:
                emit(f"Warning: writable and executable segment {i}")
            if ph.filesz > ph.memsz:
                raise DolError(
                    f"Error: TEXT segment {i} memory size (0x{ph.memsz:x}) smaller "
                    f"than file size (0x{ph.filesz:x})"
                )
            if ph.memsz > ph.filesz:
                image.add_bss((ph.vaddr + ph.filesz) & _MASK, ph.memsz - ph.filesz)
            image.add_text(ph.vaddr, ph.filesz, ph.offset)
        else:
            if not ph.flags & PF_R and i != 5:
                emit(f"Warning: non-readable segment {i}")
            if ph.filesz == 0:
                image.add_bss(ph.vaddr, ph.memsz)
            else:
                if ph.filesz > ph.memsz:
                    raise DolError(
                        f"Error: segment {i} memory size (0x{ph.memsz:x}) is smaller "
                        f"than file size (0x{ph.filesz:x})"
                    )
                image.add_data(ph.vaddr, ph.filesz, ph.offset)

    if verbosity >= 2:
        emit("Segments:")
        for n, seg in enumerate(image.text):
            emit(f" TEXT {n}: 0x{seg.address:08x} [0x{seg.size:x}] from ELF offset 0x{seg.elf_offset:x}")
        for n, seg in enumerate(image.data):
            emit(f" DATA {n}: 0x{seg.address:08x} [0x{seg.size:x}] from ELF offset 0x{seg.elf_offset:x}")
        if image.has_bss:
            emit(f" BSS segment: 0x{image.bss_address:08x} [0x{image.bss_size:x}]")
        emit("Laying out DOL file...")

    image.layout()

    if verbosity >= 2:
        for n, seg in enumerate(image.text):
            emit(f" TEXT segment {n} at 0x{seg.file_offset:x}")
        for n, seg in enumerate(image.data):
            emit(f" DATA segment {n} at 0x{seg.file_offset:x}")
    if verbosity >= 1:
        if not image.text:
            emit("Note: adding dummy TEXT segment to work around IOS bug")
        if not image.data:
            emit("Note: adding dummy DATA segment to work around IOS bug")
    return image


def _describe(image: DolImage, emit: Log) -> None:
    emit("DOL header:")
    for n, seg in enumerate(image.text):
        emit(f" TEXT {n} @ 0x{seg.address:08x} [0x{seg.size:x}] off 0x{seg.file_offset:x}")
    for n, seg in enumerate(image.data):
        emit(f" DATA {n} @ 0x{seg.address:08x} [0x{seg.size:x}] off 0x{seg.file_offset:x}")
    if image.bss_address and image.bss_size:
        emit(f" BSS @ 0x{image.bss_address:08x} [0x{image.bss_size:x}]")
    emit(f" Entry: 0x{image.entry:08x}")


def convert(elf_data: bytes, verbosity: int = 0, log: Optional[Log] = None) -> bytes:
    """Convert ELF executable bytes to DOL file bytes."""
    emit = log or _stderr
    elf = parse_elf(elf_data)
    image = dol_from_elf(elf, verbosity, emit)
    if verbosity >= 2:
        _describe(image, emit)
    return image.to_bytes(elf.data)


def convert_file(
    elf_path: Union[str, os.PathLike],
    dol_path: Union[str, os.PathLike],
    verbosity: int = 0,
    log: Optional[Log] = None,
) -> bytes:
    """Convert an ELF file on disk to a DOL file; return the bytes written."""
    emit = log or _stderr
    if verbosity >= 2:
        emit("Reading ELF file...")
    elf = read_elf(elf_path)
    image = dol_from_elf(elf, verbosity, emit)
    if verbosity >= 2:
        emit("Writing DOL file...")
        _describe(image, emit)
    dol = image.to_bytes(elf.data)
    try:
        Path(dol_path).write_bytes(dol)
    except OSError as exc:
        raise DolError(f"Could not open DOL file: {exc.strerror or exc}") from exc
    if verbosity >= 2:
        emit("All done!")
    return dol