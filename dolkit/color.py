"""Colours, materials, pixel-engine settings and material render flags."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import TypeVar

_N = TypeVar("_N", int, float)


def _check_u8(name: str, value: int) -> None:
    if not 0 <= value <= 255:
        raise ValueError(f"{name} must be in 0..255, got {value}")


@dataclass
class Color:
    """An RGBA colour with 8-bit channels."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0

    def __post_init__(self) -> None:
        for name in ("r", "g", "b", "a"):
            _check_u8(name, getattr(self, name))


@dataclass
class Material:
    """Lighting colours of a material together with its alpha and shininess."""

    ambient: Color = field(default_factory=Color)
    diffuse: Color = field(default_factory=Color)
    specular: Color = field(default_factory=Color)
    alpha: float = 0.0
    shininess: float = 0.0


@dataclass
class PEDesc:
    """Pixel-engine settings: blending, references, depth and alpha compare."""

    flags: int = 0
    ref0: int = 0
    ref1: int = 0
    dst_alpha: int = 0
    type: int = 0
    src_factor: int = 0
    dst_factor: int = 0
    logic_op: int = 0
    z_comp: int = 0
    alpha_comp0: int = 0
    alpha_op: int = 0
    alpha_comp1: int = 0

    def __post_init__(self) -> None:
        for name, value in vars(self).items():
            _check_u8(name, value)


class MaterialTrack(IntEnum):
    """Animation tracks that drive material and pixel-engine values."""

    AMBIENT_R = 1
    AMBIENT_G = 2
    AMBIENT_B = 3
    DIFFUSE_R = 4
    DIFFUSE_G = 5
    DIFFUSE_B = 6
    SPECULAR_R = 7
    SPECULAR_G = 8
    SPECULAR_B = 9
    ALPHA = 10
    PE_REF0 = 11
    PE_REF1 = 12
    PE_DSTALPHA = 13


class RenderMode(IntFlag):
    """Material render-mode bits."""

    DIFFUSE_MAT0 = 0
    DIFFUSE_MAT = 1 << 0
    DIFFUSE_VTX = 2 << 0
    DIFFUSE_BOTH = 3 << 0
    DIFFUSE_BITS = 3 << 0

    CONSTANT = 1 << 0
    VERTEX = 1 << 1
    DIFFUSE = 1 << 2
    SPECULAR = 1 << 3
    CHANNEL_FIELD = CONSTANT | VERTEX | DIFFUSE | SPECULAR

    TEX0 = 1 << 4
    TEX1 = 1 << 5
    TEX2 = 1 << 6
    TEX3 = 1 << 7
    TEX4 = 1 << 8
    TEX5 = 1 << 9
    TEX6 = 1 << 10
    TEX7 = 1 << 11
    TEXTURES = TEX0 | TEX1 | TEX2 | TEX3 | TEX4 | TEX5 | TEX6 | TEX7

    TOON = 1 << 12

    ALPHA_COMPAT = 0 << 13
    ALPHA_MAT = 1 << 13
    ALPHA_VTX = 2 << 13
    ALPHA_BOTH = 3 << 13
    ALPHA_BITS = 3 << 13

    SHADOW = 1 << 26
    ZMODE_ALWAYS = 1 << 27
    NO_ZUPDATE = 1 << 29
    XLU = 1 << 30


def clamp(value: _N, low: _N, high: _N) -> _N:
    """Limit a value to [low, high]; the bounds win at and beyond the edges."""
    if value <= low:
        return low
    if value >= high:
        return high
    return value


def mul_color(a: Color, b: Color) -> Color:
    """Multiply two colours channel by channel, scaled back to 0..255."""
    return Color(
        (a.r * b.r) // 255,
        (a.g * b.g) // 255,
        (a.b * b.b) // 255,
        (a.a * b.a) // 255,
    )


def new_material() -> Material:
    """A fresh material: all colours zero and fully opaque."""
    return Material(alpha=1.0)