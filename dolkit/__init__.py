"""Convert PowerPC ELF executables to DOL images, with colour and material helpers."""

__version__ = "0.1.0"
__all__ = ["cli", "color", "dol", "elf", "material"]