import struct

import numpy as np
import pytest

from aemkit.model import (
    VERTEX_SIZE,
    AEMError,
    InvalidFileTypeError,
    InvalidVersionError,
    TextureWrapMode,
    load_model,
    load_model as _load,
    parse_model,
)

IDENTITY4 = [1.0, 0, 0, 0, 0, 1.0, 0, 0, 0, 0, 1.0, 0, 0, 0, 0, 1.0]
IDENTITY3 = [1.0, 0, 0, 0, 1.0, 0, 0, 0, 1.0]
IMAGE = bytes([1, 2, 3, 4, 5, 6])


def _vertex(x, bone):
    return struct.pack(
        "<14f4i4fi",
        x, 0.5, 0.25,
        0, 1, 0,
        1, 0, 0,
        0, 0, 1,
        0.5, 0.75,
        bone, -1, -1, -1,
        1.0, 0, 0, 0,
        -1,
    )


def _model_bytes(magic=b"AEM", version=1, wrap=(1, 2), truncate=0):
    vertices = _vertex(1.0, 0) + _vertex(2.0, 1)
    indices = struct.pack("<3I", 0, 1, 0)
    levels = struct.pack("<2Q", 0, 4) + struct.pack("<2Q", 4, 2)
    textures = struct.pack("<5I2i", 2, 1, 4, 0, 2, *wrap)
    meshes = struct.pack("<IIi", 0, 3, 0)
    materials = struct.pack("<i9fi9fi9f", 0, *IDENTITY3, -1, *IDENTITY3, -1, *IDENTITY3)
    bones = struct.pack("<16fi3i", *IDENTITY4, -1, 0, 0, 0) + struct.pack(
        "<16fi3i", *IDENTITY4, 0, 0, 0, 0
    )
    animations = struct.pack("<128sfI", b"walk", 1.5, 0)
    sequences = struct.pack("<6I", 0, 1, 1, 1, 2, 0) + struct.pack("<6I", 0, 0, 0, 0, 0, 0)
    keyframes = (
        struct.pack("<5f", 0.0, 1.0, 2.0, 3.0, 0.0)
        + struct.pack("<5f", 0.0, 0.0, 0.0, 0.0, 1.0)
    )
    header = struct.pack(
        "<3Q8I",
        len(vertices), len(indices), len(IMAGE),
        2, 1, 1, 1, 2, 1, 2, 2,
    )
    blob = (
        magic + bytes([version]) + header + vertices + indices + IMAGE + levels + textures
        + meshes + materials + bones + animations + sequences + keyframes
    )
    return blob[: len(blob) - truncate] if truncate else blob


@pytest.fixture
def model():
    return parse_model(_model_bytes())


def test_header_counts(model):
    h = model.header
    assert (h.level_count, h.texture_count, h.mesh_count, h.material_count) == (2, 1, 1, 1)
    assert (h.bone_count, h.animation_count, h.sequence_count, h.keyframe_count) == (2, 1, 2, 2)
    assert h.image_buffer_size == len(IMAGE)


def test_buffers(model):
    assert model.image_buffer == IMAGE
    assert model.indices.tolist() == [0, 1, 0]
    assert VERTEX_SIZE == 92
    assert model.vertices.dtype.itemsize == VERTEX_SIZE
    assert model.vertices["position"][:, 0].tolist() == [1.0, 2.0]
    assert model.vertices["bone_indices"][1].tolist() == [1, -1, -1, -1]
    assert model.vertices["extra_bone_index"].tolist() == [-1, -1]


def test_textures_and_levels(model):
    texture = model.textures[0]
    assert (texture.width, texture.height, texture.channel_count) == (2, 1, 4)
    assert texture.wrap_mode == (TextureWrapMode.MIRRORED_REPEAT, TextureWrapMode.CLAMP_TO_EDGE)
    assert model.level_data(model.levels[0]) == IMAGE[:4]
    assert model.level_data(model.levels[1]) == IMAGE[4:6]


def test_material_lookup(model):
    material = model.material(0)
    assert material.base_color_tex_index == 0
    assert material.normal_tex_index == -1
    assert material.orm_uv_transform == tuple(IDENTITY3)
    assert model.material(-1) is None
    assert model.material(1) is None


def test_meshes_and_bones(model):
    assert model.meshes[0].index_count == 3
    assert [bone.parent_bone_index for bone in model.bones] == [-1, 0]
    assert np.allclose(model.bones[1].inverse_bind_matrix, IDENTITY4)


def test_animations(model):
    assert model.animation_names() == ["walk"]
    assert model.animations[0].duration == pytest.approx(1.5)
    assert model.sequences[0].rotation_keyframe_count == 1
    assert model.keyframes[0].data == (1.0, 2.0, 3.0, 0.0)
    assert model.keyframes[1].data == (0.0, 0.0, 0.0, 1.0)


def test_info(model):
    lines = model.info().splitlines()
    assert len(lines) == 11
    assert "Bone count: 2" in lines
    assert f"Image buffer size: {len(IMAGE)} bytes" in lines


def test_invalid_file_type():
    with pytest.raises(InvalidFileTypeError):
        parse_model(_model_bytes(magic=b"XYZ"))
    with pytest.raises(InvalidFileTypeError):
        parse_model(b"AE")


def test_invalid_version():
    with pytest.raises(InvalidVersionError):
        parse_model(_model_bytes(version=2))


def test_error_hierarchy():
    with pytest.raises(AEMError):
        parse_model(_model_bytes(version=3))


def test_truncated():
    with pytest.raises(AEMError):
        parse_model(_model_bytes(truncate=5))


def test_unknown_wrap_mode():
    with pytest.raises(AEMError):
        parse_model(_model_bytes(wrap=(0, 9)))


def test_load_model_from_file(tmp_path):
    path = tmp_path / "model.aem"
    path.write_bytes(_model_bytes())
    loaded = load_model(path)
    assert loaded == parse_model(_model_bytes())


def test_load_model_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        _load(tmp_path / "missing.aem")