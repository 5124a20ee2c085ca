import struct

import pytest
import yaml

from signmesh.channel import ChannelProfile, channel_with_cap
from signmesh.mesh import Mesh
from signmesh.parts import (
    ExportedPart,
    channel_export_parts,
    export_parts,
    manifest_yaml,
    part_filename,
    parts_manifest,
    slugify,
)
from signmesh.paths import SweepPath
from signmesh.primitives import box


@pytest.mark.parametrize("text, slug", [
    ("Hello World", "Hello_World"),
    ("  Max  & Co!  ", "Max__Co"),
    ("neon-sign_2", "neon-sign_2"),
    ("???", "part"),
])
def test_slugify(text, slug):
    assert slugify(text) == slug


def test_part_filename():
    part = ExportedPart("letters", box(1, 1, 1), "translucent")
    assert part_filename("Open Late", part) == "Open_Late_letters_translucent.stl"
    assert part_filename("Open Late", part, "obj") == "Open_Late_letters_translucent.obj"


def test_unknown_material_is_rejected():
    with pytest.raises(ValueError):
        ExportedPart("letters", Mesh(), "glass")


def test_export_parts_stl():
    parts = [
        ExportedPart("backing", box(10, 10, 2)),
        ExportedPart("letters", box(2, 2, 2), "translucent"),
        ExportedPart("empty", Mesh()),
    ]
    files = export_parts(parts, "OPEN")
    assert list(files) == ["OPEN_backing_opaque.stl", "OPEN_letters_translucent.stl"]
    data = files["OPEN_backing_opaque.stl"]
    assert isinstance(data, bytes)
    assert struct.unpack('<I', data[80:84])[0] == 12
    assert data.startswith(b"signmesh - backing")


def test_export_parts_obj():
    files = export_parts([ExportedPart("backing", box(10, 10, 2))], "sign", fmt="OBJ")
    text = files["sign_backing_opaque.obj"]
    assert isinstance(text, str)
    assert "o backing" in text


def test_export_parts_rejects_bad_format():
    with pytest.raises(ValueError):
        export_parts([ExportedPart("backing", box(1, 1, 1))], "sign", fmt="3mf")


def test_duplicate_filenames_are_rejected():
    parts = [ExportedPart("a b", box(1, 1, 1)), ExportedPart("a_b", box(1, 1, 1))]
    with pytest.raises(ValueError):
        export_parts(parts, "sign")


def test_manifest_is_yaml_dumpable():
    parts = [ExportedPart("backing", box(10, 10, 2)), ExportedPart("empty", Mesh())]
    manifest = parts_manifest(parts, "sign")
    assert manifest == [{
        'file': 'sign_backing_opaque.stl',
        'part': 'backing',
        'material': 'opaque',
        'triangles': 12,
    }]
    loaded = yaml.safe_load(manifest_yaml(parts, "sign"))
    assert loaded == {'parts': manifest}


def test_channel_parts_export():
    profile = ChannelProfile(width=10.0, wall_thickness=1.5, wall_height=8.0, floor_thickness=2.0)
    built = channel_with_cap(SweepPath([(0, 0), (30, 0)]), profile)
    files = export_parts(channel_export_parts(built), "Neon")
    assert sorted(files) == ["Neon_channel_base_opaque.stl", "Neon_channel_diffuser_translucent.stl"]
