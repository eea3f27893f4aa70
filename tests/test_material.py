import copy

import pytest

from dolkit.color import Color, Material, MaterialTrack, PEDesc, RenderMode, new_material
from dolkit.material import MaterialDesc, MaterialObject, apply_track


def _desc(**kwargs):
    base = dict(
        rendermode=RenderMode.DIFFUSE | RenderMode.TEX0,
        material=Material(
            ambient=Color(1, 2, 3, 4),
            diffuse=Color(5, 6, 7, 8),
            specular=Color(9, 10, 11, 12),
            alpha=1.0,
            shininess=50.0,
        ),
    )
    base.update(kwargs)
    return MaterialDesc(**base)


def test_from_desc_none_returns_none():
    assert MaterialObject.from_desc(None) is None


def test_from_desc_adds_toon_and_keeps_flags():
    obj = MaterialObject.from_desc(_desc())
    assert obj.rendermode == RenderMode.DIFFUSE | RenderMode.TEX0 | RenderMode.TOON


def test_from_desc_copies_material():
    desc = _desc()
    obj = MaterialObject.from_desc(desc)
    assert obj.material == desc.material
    obj.material.ambient.r = 200
    assert desc.material.ambient.r == 1


def test_from_desc_pe_handling():
    assert MaterialObject.from_desc(_desc()).pe is None
    pe = PEDesc(flags=9, src_factor=4, dst_factor=5)
    desc = _desc(pe=pe)
    obj = MaterialObject.from_desc(desc)
    assert obj.pe == pe
    obj.pe.ref0 = 77
    assert pe.ref0 == 0


def test_set_and_clear_flags():
    obj = MaterialObject(rendermode=0)
    obj.set_flags(RenderMode.SHADOW | RenderMode.XLU)
    assert obj.rendermode == RenderMode.SHADOW | RenderMode.XLU
    obj.clear_flags(RenderMode.SHADOW)
    assert obj.rendermode == RenderMode.XLU
    obj.clear_flags(RenderMode.XLU)
    assert obj.rendermode == 0


def test_set_alpha():
    obj = MaterialObject(material=new_material())
    obj.set_alpha(0.25)
    assert obj.material.alpha == 0.25


def test_set_alpha_without_material_is_ignored():
    obj = MaterialObject()
    obj.set_alpha(0.25)
    assert obj.material is None


@pytest.mark.parametrize(
    "track,colour,channel",
    [
        (MaterialTrack.AMBIENT_R, "ambient", "r"),
        (MaterialTrack.AMBIENT_G, "ambient", "g"),
        (MaterialTrack.AMBIENT_B, "ambient", "b"),
        (MaterialTrack.DIFFUSE_R, "diffuse", "r"),
        (MaterialTrack.DIFFUSE_G, "diffuse", "g"),
        (MaterialTrack.DIFFUSE_B, "diffuse", "b"),
        (MaterialTrack.SPECULAR_R, "specular", "r"),
        (MaterialTrack.SPECULAR_G, "specular", "g"),
        (MaterialTrack.SPECULAR_B, "specular", "b"),
    ],
)
def test_colour_tracks_scale_and_clamp(track, colour, channel):
    mat = new_material()
    apply_track(mat, None, track, 1.0)
    assert getattr(getattr(mat, colour), channel) == 255
    apply_track(mat, None, track, 5.0)
    assert getattr(getattr(mat, colour), channel) == 255
    apply_track(mat, None, track, -3.0)
    assert getattr(getattr(mat, colour), channel) == 0


def test_colour_track_truncates():
    mat = new_material()
    apply_track(mat, None, MaterialTrack.DIFFUSE_R, 0.5)
    assert mat.diffuse.r == 127


def test_colour_track_touches_only_its_channel():
    mat = new_material()
    apply_track(mat, None, MaterialTrack.SPECULAR_G, 1.0)
    assert mat.specular.r == 0 and mat.specular.b == 0
    assert mat.ambient == Color() and mat.diffuse == Color()


def test_alpha_track_is_complement():
    mat = new_material()
    apply_track(mat, None, MaterialTrack.ALPHA, 1.0)
    assert mat.alpha == 0.0
    apply_track(mat, None, MaterialTrack.ALPHA, 0.0)
    assert mat.alpha == 1.0
    apply_track(mat, None, MaterialTrack.ALPHA, 2.0)
    assert mat.alpha == 0.0
    apply_track(mat, None, MaterialTrack.ALPHA, -1.0)
    assert mat.alpha == 1.0


@pytest.mark.parametrize(
    "track,attr",
    [
        (MaterialTrack.PE_REF0, "ref0"),
        (MaterialTrack.PE_REF1, "ref1"),
        (MaterialTrack.PE_DSTALPHA, "dst_alpha"),
    ],
)
def test_pe_tracks(track, attr):
    pe = PEDesc()
    apply_track(None, pe, track, 1.0)
    assert getattr(pe, attr) == 255
    apply_track(None, pe, track, -1.0)
    assert getattr(pe, attr) == 0


def test_pe_track_without_pe_leaves_material_alone():
    mat = new_material()
    before = copy.deepcopy(mat)
    apply_track(mat, None, MaterialTrack.PE_REF0, 1.0)
    assert mat == before


def test_unknown_track_is_ignored():
    mat = new_material()
    pe = PEDesc()
    before_mat, before_pe = copy.deepcopy(mat), copy.deepcopy(pe)
    apply_track(mat, pe, 0, 1.0)
    apply_track(mat, pe, 99, 1.0)
    assert mat == before_mat
    assert pe == before_pe


def test_method_apply_track_uses_own_material_and_pe():
    obj = MaterialObject.from_desc(_desc(pe=PEDesc()))
    obj.apply_track(MaterialTrack.AMBIENT_B, 1.0)
    obj.apply_track(MaterialTrack.PE_REF1, 1.0)
    assert obj.material.ambient.b == 255
    assert obj.pe.ref1 == 255


def test_method_apply_track_without_material():
    obj = MaterialObject()
    obj.apply_track(MaterialTrack.AMBIENT_R, 1.0)
    assert obj.material is None