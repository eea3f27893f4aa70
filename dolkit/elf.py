"""Reading 32-bit big-endian PowerPC ELF executables."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Union

ELF_MAGIC = b"\x7fELF"

EI_CLASS = 4
EI_DATA = 5
EI_VERSION = 6

ELFCLASS32 = 1
ELFDATA2MSB = 2
EV_CURRENT = 1

ET_EXEC = 2
EM_PPC = 20

PT_LOAD = 1
PF_R = 4
PF_W = 2
PF_X = 1

_EHDR = struct.Struct(">16sHHIIIIIHHHHHH")
_PHDR = struct.Struct(">8I")

EHDR_SIZE = _EHDR.size
PHDR_SIZE = _PHDR.size


class ElfError(ValueError):
    """Raised when an ELF file cannot be read or is not a usable executable."""


@dataclass(frozen=True)
class ProgramHeader:
    """One entry of the ELF program header table."""

    index: int
    type: int
    offset: int
    vaddr: int
    paddr: int
    filesz: int
    memsz: int
    flags: int
    align: int

    def is_load(self) -> bool:
        """Whether this header describes a loadable segment."""
        return self.type == PT_LOAD

    @property
    def readable(self) -> bool:
        return bool(self.flags & PF_R)

    @property
    def writable(self) -> bool:
        return bool(self.flags & PF_W)

    @property
    def executable(self) -> bool:
        return bool(self.flags & PF_X)


@dataclass
class ElfImage:
    """A validated ELF executable: its entry point, program headers and raw bytes."""

    entry: int
    program_headers: list[ProgramHeader]
    data: bytes = field(repr=False)


def parse_elf(data: bytes) -> ElfImage:
    """Validate an ELF executable held in memory and read its program headers."""
    data = bytes(data)
    if len(data) < EHDR_SIZE:
        raise ElfError("EOF while reading ELF header")

    (
        ident,
        e_type,
        e_machine,
        e_version,
        e_entry,
        e_phoff,
        _e_shoff,
        _e_flags,
        _e_ehsize,
        e_phentsize,
        e_phnum,
        _e_shentsize,
        _e_shnum,
        _e_shstrndx,
    ) = _EHDR.unpack_from(data)

    if ident[:4] != ELF_MAGIC:
        raise ElfError("Invalid ELF header")
    if ident[EI_CLASS] != ELFCLASS32:
        raise ElfError("Invalid ELF class")
    if ident[EI_DATA] != ELFDATA2MSB:
        raise ElfError("Invalid ELF byte order")
    if ident[EI_VERSION] != EV_CURRENT:
        raise ElfError("Invalid ELF ident version")
    if e_version != EV_CURRENT:
        raise ElfError("Invalid ELF version")
    if e_type != ET_EXEC:
        raise ElfError("ELF is not an executable")
    if e_machine != EM_PPC:
        raise ElfError("Machine is not PowerPC")
    if not e_entry:
        raise ElfError("ELF has no entrypoint")

    if not e_phnum or not e_phoff:
        raise ElfError("ELF has no program headers")
    if e_phentsize != PHDR_SIZE:
        raise ElfError("Invalid program header entry size")

    table_end = e_phoff + e_phnum * PHDR_SIZE
    if table_end > len(data):
        raise ElfError("EOF while reading ELF program headers")

    headers = [
        ProgramHeader(index, *fields)
        for index, fields in enumerate(_PHDR.iter_unpack(data[e_phoff:table_end]))
    ]
    return ElfImage(entry=e_entry, program_headers=headers, data=data)


def read_elf(path: Union[str, os.PathLike]) -> ElfImage:
    """Read and validate an ELF executable from a file."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise ElfError(f"Could not open ELF file: {exc.strerror or exc}") from exc
    return parse_elf(data)