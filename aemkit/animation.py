"""Evaluation of skeletal animations stored in AEM models."""

from __future__ import annotations

import math
from typing import Callable, Sequence

import numpy as np

from .model import Animation, Keyframe, Model

_SLERP_LERP_THRESHOLD = 0.001


def _lerp(a: np.ndarray, b: np.ndarray, t: float) -> np.ndarray:
    return a + (b - a) * t


def quat_slerp(a, b, t: float) -> np.ndarray:
    """Spherically interpolate two [x, y, z, w] quaternions, taking the short path."""
    start = np.asarray(a, dtype=np.float64)
    end = np.asarray(b, dtype=np.float64)
    cos_theta = float(np.dot(start, end))
    if abs(cos_theta) >= 1.0:
        return start.copy()

    q1 = start
    if cos_theta < 0.0:
        q1 = -start
        cos_theta = -cos_theta

    sin_theta = math.sqrt(1.0 - cos_theta * cos_theta)
    if abs(sin_theta) < _SLERP_LERP_THRESHOLD:
        return _lerp(start, end, t)

    angle = math.acos(cos_theta)
    blended = q1 * math.sin((1.0 - t) * angle) + end * math.sin(t * angle)
    return blended / sin_theta


def _sample(
    keyframes: Sequence[Keyframe],
    time: float,
    size: int,
    mix: Callable[[np.ndarray, np.ndarray, float], np.ndarray],
) -> np.ndarray:
    if not keyframes:
        raise ValueError("no keyframes to sample")

    after = next((i for i, kf in enumerate(keyframes) if kf.time >= time), len(keyframes))
    if after == 0:
        return np.array(keyframes[0].data[:size], dtype=np.float64)
    if after == len(keyframes):
        return np.array(keyframes[-1].data[:size], dtype=np.float64)

    before, next_frame = keyframes[after - 1], keyframes[after]
    blend = (time - before.time) / (next_frame.time - before.time)
    return mix(
        np.array(before.data[:size], dtype=np.float64),
        np.array(next_frame.data[:size], dtype=np.float64),
        blend,
    )


def sample_vec3(keyframes: Sequence[Keyframe], time: float) -> np.ndarray:
    """Sample position or scale keyframes at ``time``, clamping outside their range."""
    return _sample(keyframes, time, 3, _lerp)


def sample_quat(keyframes: Sequence[Keyframe], time: float) -> np.ndarray:
    """Sample rotation keyframes at ``time``, clamping outside their range."""
    return _sample(keyframes, time, 4, quat_slerp)


def _translation(v: np.ndarray) -> np.ndarray:
    m = np.eye(4)
    m[:3, 3] = v
    return m


def _scale(v: np.ndarray) -> np.ndarray:
    return np.diag([v[0], v[1], v[2], 1.0])


def _rotation(q: np.ndarray) -> np.ndarray:
    x, y, z, w = q
    norm = math.sqrt(x * x + y * y + z * z + w * w)
    s = 2.0 / norm if norm > 0.0 else 0.0
    xx, yy, zz = s * x * x, s * y * y, s * z * z
    xy, yz, xz = s * x * y, s * y * z, s * x * z
    wx, wy, wz = s * w * x, s * w * y, s * w * z
    return np.array(
        [
            [1.0 - yy - zz, xy - wz, xz + wy, 0.0],
            [xy + wz, 1.0 - xx - zz, yz - wx, 0.0],
            [xz - wy, yz + wx, 1.0 - xx - yy, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ]
    )


def _keyframes(model: Model, first: int, count: int) -> list[Keyframe]:
    return model.keyframes[first:first + count]


def bone_local_transform(model: Model, animation: Animation, bone_index: int, time: float) -> np.ndarray:
    """Return the posed translation * rotation * scale matrix of one bone at ``time``."""
    sequence = model.sequences[animation.sequence_index + bone_index]
    transform = np.eye(4)

    if sequence.position_keyframe_count > 0:
        frames = _keyframes(model, sequence.first_position_keyframe_index, sequence.position_keyframe_count)
        transform = transform @ _translation(sample_vec3(frames, time))

    if sequence.rotation_keyframe_count > 0:
        frames = _keyframes(model, sequence.first_rotation_keyframe_index, sequence.rotation_keyframe_count)
        transform = transform @ _rotation(sample_quat(frames, time))

    if sequence.scale_keyframe_count > 0:
        frames = _keyframes(model, sequence.first_scale_keyframe_index, sequence.scale_keyframe_count)
        transform = transform @ _scale(sample_vec3(frames, time))

    return transform


def _inverse_bind_matrix(flat: Sequence[float]) -> np.ndarray:
    return np.asarray(flat, dtype=np.float64).reshape(4, 4).T


def evaluate_animation(model: Model, animation_index: int, time: float) -> np.ndarray:
    """Return one skinning matrix per bone, shape (bone_count, 4, 4).

    A negative ``animation_index`` selects the bind pose, where every matrix
    is the identity. Matrices act on column vectors.
    """
    bone_count = len(model.bones)
    if animation_index < 0:
        return np.tile(np.eye(4), (bone_count, 1, 1))
    if animation_index >= len(model.animations):
        raise IndexError(f"animation index {animation_index} out of range")

    animation = model.animations[animation_index]
    local = [bone_local_transform(model, animation, i, time) for i in range(bone_count)]

    result = np.empty((bone_count, 4, 4))
    for bone_index, bone in enumerate(model.bones):
        transform = local[bone_index]
        parent = bone.parent_bone_index
        while parent >= 0:
            transform = local[parent] @ transform
            parent = model.bones[parent].parent_bone_index
        result[bone_index] = transform @ _inverse_bind_matrix(bone.inverse_bind_matrix)
    return result