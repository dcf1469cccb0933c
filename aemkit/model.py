"""Reading of AEM model files."""

from __future__ import annotations

import enum
import struct
from dataclasses import dataclass
from pathlib import Path

import numpy as np

MAGIC = b"AEM"
VERSION = 1

VERTEX_SIZE = 92
INDEX_SIZE = 4
STRING_SIZE = 128

VERTEX_DTYPE = np.dtype(
    [
        ("position", "<f4", (3,)),
        ("normal", "<f4", (3,)),
        ("tangent", "<f4", (3,)),
        ("bitangent", "<f4", (3,)),
        ("uv", "<f4", (2,)),
        ("bone_indices", "<i4", (4,)),
        ("bone_weights", "<f4", (4,)),
        ("extra_bone_index", "<i4"),
    ]
)

_HEADER = struct.Struct("<3Q8I")
_LEVEL = struct.Struct("<2Q")
_TEXTURE = struct.Struct("<5I2i")
_MESH = struct.Struct("<IIi")
_MATERIAL = struct.Struct("<i9fi9fi9f")
_BONE = struct.Struct("<16fi3i")
_ANIMATION = struct.Struct(f"<{STRING_SIZE}sfI")
_SEQUENCE = struct.Struct("<6I")
_KEYFRAME = struct.Struct("<5f")


class AEMError(Exception):
    """Raised when AEM data cannot be read."""


class InvalidFileTypeError(AEMError):
    """The data does not start with the AEM identifier."""


class InvalidVersionError(AEMError):
    """The data is of an AEM version that is not supported."""


class TextureWrapMode(enum.IntEnum):
    REPEAT = 0
    MIRRORED_REPEAT = 1
    CLAMP_TO_EDGE = 2
    CLAMP_TO_BORDER = 3


@dataclass(frozen=True)
class Header:
    vertex_buffer_size: int
    index_buffer_size: int
    image_buffer_size: int
    level_count: int
    texture_count: int
    mesh_count: int
    material_count: int
    bone_count: int
    animation_count: int
    sequence_count: int
    keyframe_count: int


@dataclass(frozen=True)
class Level:
    """A region of the image buffer."""

    offset: int
    size: int


@dataclass(frozen=True)
class Texture:
    width: int
    height: int
    channel_count: int
    first_level: int
    level_count: int
    wrap_mode: tuple[TextureWrapMode, TextureWrapMode]


@dataclass(frozen=True)
class Mesh:
    first_index: int
    index_count: int
    material_index: int


@dataclass(frozen=True)
class Material:
    base_color_tex_index: int
    base_color_uv_transform: tuple[float, ...]
    normal_tex_index: int
    normal_uv_transform: tuple[float, ...]
    orm_tex_index: int
    orm_uv_transform: tuple[float, ...]


@dataclass(frozen=True)
class Bone:
    inverse_bind_matrix: tuple[float, ...]
    parent_bone_index: int


@dataclass(frozen=True)
class Animation:
    name: str
    duration: float
    sequence_index: int


@dataclass(frozen=True)
class Sequence:
    first_position_keyframe_index: int
    position_keyframe_count: int
    first_rotation_keyframe_index: int
    rotation_keyframe_count: int
    first_scale_keyframe_index: int
    scale_keyframe_count: int


@dataclass(frozen=True)
class Keyframe:
    """A keyframe; data is [x, y, z, 0] for position and scale, [x, y, z, w] for rotation."""

    time: float
    data: tuple[float, float, float, float]


@dataclass
class Model:
    header: Header
    vertex_buffer: bytes
    index_buffer: bytes
    image_buffer: bytes
    levels: list[Level]
    textures: list[Texture]
    meshes: list[Mesh]
    materials: list[Material]
    bones: list[Bone]
    animations: list[Animation]
    sequences: list[Sequence]
    keyframes: list[Keyframe]

    @property
    def vertices(self) -> np.ndarray:
        """The vertex buffer as a structured array."""
        return np.frombuffer(self.vertex_buffer, dtype=VERTEX_DTYPE)

    @property
    def indices(self) -> np.ndarray:
        """The index buffer as unsigned 32-bit integers."""
        return np.frombuffer(self.index_buffer, dtype="<u4")

    def material(self, index: int) -> Material | None:
        """Return the material at ``index``, or None when the index is out of range."""
        if index < 0 or index >= len(self.materials):
            return None
        return self.materials[index]

    def level_data(self, level: Level) -> bytes:
        """Return the image bytes that ``level`` refers to."""
        return self.image_buffer[level.offset:level.offset + level.size]

    def info(self) -> str:
        """Return a human-readable summary of the header."""
        h = self.header
        return "\n".join(
            [
                f"Vertex buffer size: {h.vertex_buffer_size} bytes",
                f"Index buffer size: {h.index_buffer_size} bytes",
                f"Image buffer size: {h.image_buffer_size} bytes",
                f"Level count: {h.level_count}",
                f"Texture count: {h.texture_count}",
                f"Mesh count: {h.mesh_count}",
                f"Material count: {h.material_count}",
                f"Bone count: {h.bone_count}",
                f"Animation count: {h.animation_count}",
                f"Sequence count: {h.sequence_count}",
                f"Keyframe count: {h.keyframe_count}",
            ]
        )

    def animation_names(self) -> list[str]:
        return [animation.name for animation in self.animations]


class _Reader:
    def __init__(self, data: bytes) -> None:
        self._data = memoryview(data)
        self._offset = 0

    def take(self, size: int, what: str) -> bytes:
        end = self._offset + size
        if end > len(self._data):
            raise AEMError(f"unexpected end of data while reading {what}")
        chunk = bytes(self._data[self._offset:end])
        self._offset = end
        return chunk

    def records(self, layout: struct.Struct, count: int, what: str) -> list[tuple]:
        return list(layout.iter_unpack(self.take(layout.size * count, what)))


def _wrap_mode(value: int) -> TextureWrapMode:
    try:
        return TextureWrapMode(value)
    except ValueError:
        raise AEMError(f"unknown texture wrap mode {value}") from None


def _decode_name(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode("utf-8", errors="replace")


def parse_model(data: bytes) -> Model:
    """Parse the bytes of an AEM file into a Model."""
    reader = _Reader(data)
    if len(data) < 4 or bytes(data[:3]) != MAGIC:
        raise InvalidFileTypeError("not an AEM file")
    if data[3] != VERSION:
        raise InvalidVersionError(f"unsupported AEM version {data[3]}")
    reader.take(4, "identifier")

    header = Header(*_HEADER.unpack(reader.take(_HEADER.size, "header")))

    vertex_buffer = reader.take(header.vertex_buffer_size, "vertex buffer")
    index_buffer = reader.take(header.index_buffer_size, "index buffer")
    image_buffer = reader.take(header.image_buffer_size, "image buffer")

    levels = [Level(*fields) for fields in reader.records(_LEVEL, header.level_count, "levels")]
    textures = [
        Texture(w, h, channels, first, count, (_wrap_mode(wrap_x), _wrap_mode(wrap_y)))
        for w, h, channels, first, count, wrap_x, wrap_y in reader.records(
            _TEXTURE, header.texture_count, "textures"
        )
    ]
    meshes = [Mesh(*fields) for fields in reader.records(_MESH, header.mesh_count, "meshes")]
    materials = [
        Material(
            int(f[0]), tuple(f[1:10]),
            int(f[10]), tuple(f[11:20]),
            int(f[20]), tuple(f[21:30]),
        )
        for f in reader.records(_MATERIAL, header.material_count, "materials")
    ]
    bones = [
        Bone(tuple(f[:16]), int(f[16]))
        for f in reader.records(_BONE, header.bone_count, "bones")
    ]
    animations = [
        Animation(_decode_name(name), duration, sequence_index)
        for name, duration, sequence_index in reader.records(
            _ANIMATION, header.animation_count, "animations"
        )
    ]
    sequences = [
        Sequence(*fields) for fields in reader.records(_SEQUENCE, header.sequence_count, "sequences")
    ]
    keyframes = [
        Keyframe(f[0], tuple(f[1:5]))
        for f in reader.records(_KEYFRAME, header.keyframe_count, "keyframes")
    ]

    return Model(
        header=header,
        vertex_buffer=vertex_buffer,
        index_buffer=index_buffer,
        image_buffer=image_buffer,
        levels=levels,
        textures=textures,
        meshes=meshes,
        materials=materials,
        bones=bones,
        animations=animations,
        sequences=sequences,
        keyframes=keyframes,
    )


def load_model(path) -> Model:
    """Read and parse an AEM file."""
    return parse_model(Path(path).read_bytes())