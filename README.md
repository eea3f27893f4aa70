# dolkit

dolkit converts a 32-bit, big-endian PowerPC ELF executable into a DOL image.
It also has small helpers for colours and materials.

## How the conversion works

The DOL image is laid out by program segment. Only loadable program headers
with a non-zero memory size are used.

- An executable segment becomes a TEXT segment. There can be at most 7.
- A non-executable segment that has file data becomes a DATA segment. There can be at most 11.
- A segment with no file data becomes part of one single BSS range. So does the part of an executable segment that lies past its file data. The range runs from the lowest start to the furthest end.

The image starts with a 256-byte header. Each segment goes at a 32-byte
aligned offset and is padded with zeros. The header records segment sizes
rounded up to 32 bytes. When there are no TEXT or no DATA segments, the
first offset slot is still set to the end of the header.

## Installation

```
pip install .
```

## Command line

```
dolkit [-h] [-v] [--] elf-file dol-file
```

You can also run it as `python -m dolkit.cli`.

- `-h` prints the usage text and exits with status 1.
- `-v` prints more information on standard error.
  - With one `-v` you see skipped program headers and notes about dummy segments.
  - With two you also see the full segment map and the DOL header.
- `--` ends option parsing.

Warnings about non-readable segments, and about segments that are both writable and executable, are always printed.

The command exits with status 1 in these cases:

- bad usage;
- an unknown option;
- an ELF file that cannot be read or is invalid;
- an ELF that cannot be mapped, for example with too many segments or a file size larger than the memory size;
- a DOL file that cannot be written.

Otherwise it exits with status 0.

## Library use

```python
from dolkit.dol import convert, convert_file, dol_from_elf
from dolkit.elf import parse_elf, read_elf

convert_file("main.elf", "main.dol")

with open("main.elf", "rb") as f:
    dol_bytes = convert(f.read())

image = dol_from_elf(read_elf("main.elf"))
header = image.header_bytes()
```

### Reading ELF files (`dolkit.elf`)

- `parse_elf(data)` checks the ELF header and returns an `ElfImage`. It checks the magic, the class, the byte order, the version, that the file is an executable, that the machine is PowerPC, that there is an entry point, and the program header table. An `ElfImage` holds `entry`, `program_headers` (a list of `ProgramHeader`) and `data`.
- `read_elf(path)` does the same for a file on disk.
- Both raise `ElfError`, a subclass of `ValueError`.

### Building DOL images (`dolkit.dol`)

- `dol_from_elf(elf, verbosity=0, log=None)` builds a `DolImage` from a parsed ELF.
- `DolImage` has these methods:
  - `add_text`, `add_data` and `add_bss` add segments;
  - `layout` assigns file offsets and returns the file size;
  - `header_bytes` returns the header;
  - `to_bytes(elf_data)` returns the complete file.
- `convert(elf_data, verbosity=0, log=None)` returns the DOL bytes.
- `convert_file(elf_path, dol_path, verbosity=0, log=None)` writes the DOL file and returns the bytes it wrote.
- `align(value)` rounds up to 32 bytes.
- Problems are raised as `DolError`, a subclass of `ValueError`.
- Diagnostic messages go to the `log` callable when you pass one. Otherwise they go to standard error.

### Colours and materials (`dolkit.color`, `dolkit.material`)

```python
from dolkit.color import Color, MaterialTrack, RenderMode, mul_color, new_material
from dolkit.material import MaterialDesc, MaterialObject

tinted = mul_color(Color(255, 128, 0, 255), Color(128, 128, 128, 255))

obj = MaterialObject.from_desc(MaterialDesc(rendermode=RenderMode.SPECULAR))
obj.apply_track(MaterialTrack.DIFFUSE_R, 0.5)
obj.apply_track(MaterialTrack.ALPHA, 0.25)
```

#### `dolkit.color`

- `Color` is an RGBA colour. Each channel must be in 0..255, or `ValueError` is raised.
- `PEDesc` holds pixel-engine settings. Its fields are checked against 0..255 in the same way.
- `Material` holds the ambient, diffuse and specular colours, plus alpha and shininess. `new_material()` gives a fresh material with all colours zero and alpha 1.0.
- `mul_color(a, b)` multiplies two colours channel by channel and divides by 255, rounding down.
- `clamp(value, low, high)` limits a value to the range from `low` to `high`.
- `RenderMode` is a flag enum of the render-mode bits.
- `MaterialTrack` names the animation tracks.

#### `dolkit.material`

- `MaterialObject.from_desc(desc)` loads an object from a `MaterialDesc`.
  - It always switches on `RenderMode.TOON`.
  - It copies the material and the PE settings.
  - It returns `None` when `desc` is `None`.
- `set_flags` and `clear_flags` change the render mode. `set_alpha` sets the material alpha.
- `apply_track(track, value)` handles animation values:
  - Colour and PE tracks take a value from 0 to 1, clamp it, and scale it to 0..255.
  - The alpha track stores `1 - value`, clamped.
  - Unknown tracks are ignored. So are missing targets.
- The same logic is available as the function `apply_track(material, pe, track, value)`.

## What the package does not do

dolkit does no rendering. Material objects only hold values. Nothing turns
them into GPU or texture-environment state. There is no texture handling and
no shadow handling.

## Tests

```
pip install .[test]
pytest
```