# aemkit

`aemkit` reads AEM model files and evaluates their skeletal animations. It also
provides the state objects that an interactive model viewer keeps: animation
playback, an orbiting camera, a directional light and an input handler that
ties them together.

## Installation

```
pip install .
```

The tests need the `test` extra:

```
pip install .[test]
pytest
```

## Loading a model

```python
from aemkit.model import load_model

model = load_model("character.aem")
print(model.info())
print(model.animation_names())
```

`load_model` reads a file and hands its bytes to `parse_model`, which can also be
called directly on data already in memory. Errors are raised as exceptions:

- `InvalidFileTypeError` when the data does not start with `AEM`;
- `InvalidVersionError` when the format version byte is not 1;
- `AEMError` (the base class of both) when the data ends early or a texture
  has an unknown wrap mode.

A `Model` holds the `Header`, the raw vertex, index and image buffers, and lists
of `Level`, `Texture`, `Mesh`, `Material`, `Bone`, `Animation`, `Sequence` and
`Keyframe` records. Texture wrap modes are `TextureWrapMode` members.

- `model.vertices` views the vertex buffer as a NumPy structured array with the
  fields `position`, `normal`, `tangent`, `bitangent`, `uv`, `bone_indices`,
  `bone_weights` and `extra_bone_index`.
- `model.indices` views the index buffer as unsigned 32-bit integers.
- `model.material(index)` returns the material, or `None` when the index is out
  of range (a negative index included).
- `model.level_data(level)` returns the bytes of one texture level from the
  image buffer.
- `model.info()` returns a multi-line summary of the header counts and sizes.
- `model.animation_names()` lists the animation names.

## Evaluating animations

```python
from aemkit.animation import evaluate_animation

transforms = evaluate_animation(model, 0, 0.5)   # shape (bone_count, 4, 4)
```

Each matrix is the posed transform of the bone and all of its parents,
multiplied by the bone's inverse bind matrix; matrices act on column vectors.
A negative animation index gives the bind pose, every matrix the identity. An
index past the last animation raises `IndexError`.

The building blocks are public too:

- `sample_vec3(keyframes, time)` and `sample_quat(keyframes, time)` blend
  between the keyframes around `time` and hold the first or last value outside
  their range; an empty list raises `ValueError`.
- `quat_slerp(a, b, t)` interpolates `[x, y, z, w]` quaternions along the short
  path.
- `bone_local_transform(model, animation, bone_index, time)` builds the
  translation × rotation × scale matrix of one bone.

## Viewer state

- `aemkit.animation_state.AnimationState` holds the current animation
  (`-1` for the bind pose), the playhead, the speed in percent and looping.
  `activate(index)` switches animation (ignoring indices past
  `animation_count`); `update(delta_time, duration)` advances the playhead and
  either wraps to zero or stops at the end.
- `aemkit.camera.Camera` orbits a pivot with `tumble(dx, dy)`, moves sideways
  with `pan(dx, dy)`, moves towards the pivot with `dolly(dx, dy)` and returns to
  the default pivot with `reset_pivot()`. `view_matrix()` and
  `proj_matrix(aspect, fov)` (fov in radians) give right-handed matrices.
- `aemkit.camera.Light` is a directional light; `tumble(dx, dy)` rotates it
  about the vertical axis and `direction()` gives its normalised direction.
- `aemkit.input.InputHandler` takes an `AnimationState`, `DisplayState`,
  `SceneState`, `Camera` and `Light`, plus optional `on_file_open` and
  `is_mouse_consumed` callables. Feed it events with
  `cursor_pos(x, y, window_width, window_height)`, `scroll(x, y)`,
  `mouse_button(button, action)` and `key(key, action)`, using the `Key`,
  `MouseButton` and `Action` codes. Dragging with the left button tumbles the
  camera (the light while left shift is held), the right button pans, and the
  scroll wheel dollies. Released keys toggle the GUI, grid, skeleton, camera
  auto-rotation and looping, halve or double the scene scale (kept within
  1–500 %), play or pause, and select the bind pose (0) or an animation (1–9).

## Utilities

`aemkit.util` holds:

- path helpers `filename_from_filepath`, `path_from_filepath`,
  `basename_from_filename` and `extension_from_filepath`, which accept both
  `/` and `\` as separators;
- `load_text_file`, which raises `ValueError` for an empty file;
- `parse_list_file`, which splits text on whitespace, keeps quoted text
  together and drops `#` comments;
- `is_mat4_identity` for 16-value matrices;
- the console helpers `format_indent` and `format_checkbox`.

## What it does not do

`aemkit` does not draw anything. It has no window, no GUI, no file dialog, no
texture upload and no command-line program; it gives the data and state a
renderer would use, and leaves the rendering and the event loop to the caller.