"""Material objects: render flags, lighting colours and animated tracks."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Optional

from dolkit.color import Material, MaterialTrack, PEDesc, RenderMode, clamp, new_material

_COLOR_TRACKS: dict[int, tuple[str, str]] = {
    MaterialTrack.AMBIENT_R: ("ambient", "r"),
    MaterialTrack.AMBIENT_G: ("ambient", "g"),
    MaterialTrack.AMBIENT_B: ("ambient", "b"),
    MaterialTrack.DIFFUSE_R: ("diffuse", "r"),
    MaterialTrack.DIFFUSE_G: ("diffuse", "g"),
    MaterialTrack.DIFFUSE_B: ("diffuse", "b"),
    MaterialTrack.SPECULAR_R: ("specular", "r"),
    MaterialTrack.SPECULAR_G: ("specular", "g"),
    MaterialTrack.SPECULAR_B: ("specular", "b"),
}

_PE_TRACKS: dict[int, str] = {
    MaterialTrack.PE_REF0: "ref0",
    MaterialTrack.PE_REF1: "ref1",
    MaterialTrack.PE_DSTALPHA: "dst_alpha",
}

_U32 = 0xFFFFFFFF


def _to_byte(value: float) -> int:
    """Scale a unit value to 0..255, truncating toward zero."""
    return int(255 * clamp(float(value), 0.0, 1.0))


def apply_track(
    material: Optional[Material],
    pe: Optional[PEDesc],
    track: int,
    value: float,
) -> None:
    """Write an animated value into the material or pixel-engine field a track drives.

    Colour and pixel-engine tracks take a unit value scaled to 0..255; the alpha
    track stores the complement of its value. Targets that are absent and
    unknown tracks are ignored.
    """
    if track in _COLOR_TRACKS:
        if material is not None:
            colour_name, channel = _COLOR_TRACKS[track]
            setattr(getattr(material, colour_name), channel, _to_byte(value))
    elif track == MaterialTrack.ALPHA:
        if material is not None:
            material.alpha = clamp(1.0 - float(value), 0.0, 1.0)
    elif track in _PE_TRACKS:
        if pe is not None:
            setattr(pe, _PE_TRACKS[track], _to_byte(value))


@dataclass
class MaterialDesc:
    """The stored description a material object is loaded from."""

    class_name: Optional[str] = None
    rendermode: int = 0
    material: Material = field(default_factory=new_material)
    pe: Optional[PEDesc] = None


@dataclass
class MaterialObject:
    """A live material: render mode, its own material copy and optional PE settings."""

    rendermode: int = 0
    material: Optional[Material] = None
    pe: Optional[PEDesc] = None
    class_name: Optional[str] = None

    def set_flags(self, flags: int) -> None:
        """Turn on render-mode bits."""
        self.rendermode = (self.rendermode | int(flags)) & _U32

    def clear_flags(self, flags: int) -> None:
        """Turn off render-mode bits."""
        self.rendermode = self.rendermode & ~int(flags) & _U32

    def set_alpha(self, alpha: float) -> None:
        """Set the material alpha, if there is a material."""
        if self.material is not None:
            self.material.alpha = alpha

    def apply_track(self, track: int, value: float) -> None:
        """Apply one animated track value to this object's material or PE settings."""
        apply_track(self.material, self.pe, track, value)

    @classmethod
    def from_desc(cls, desc: Optional[MaterialDesc]) -> Optional["MaterialObject"]:
        """Load an object from a description; toon rendering is always switched on."""
        if desc is None:
            return None
        return cls(
            rendermode=(int(desc.rendermode) | RenderMode.TOON) & _U32,
            material=copy.deepcopy(desc.material),
            pe=replace(desc.pe) if desc.pe is not None else None,
            class_name=desc.class_name,
        )