"""Mouse and keyboard handling of the viewer."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Callable

from .animation_state import AnimationState
from .camera import Camera, Light

_MIN_SCALE = 1
_MAX_SCALE = 500


@dataclass
class DisplayState:
    gui: bool = True
    grid: bool = True
    skeleton: bool = False


@dataclass
class SceneState:
    scale: int = 100  # percent
    camera_fov: int = 60  # degrees
    auto_rotate_camera: bool = False
    auto_rotate_camera_speed: int = 100  # percent
    background_color: list[float] = field(default_factory=lambda: [0.0, 0.0, 0.0])


class Key(enum.IntEnum):
    SPACE = 32
    MINUS = 45
    NUM_0 = 48
    NUM_1 = 49
    NUM_2 = 50
    NUM_3 = 51
    NUM_4 = 52
    NUM_5 = 53
    NUM_6 = 54
    NUM_7 = 55
    NUM_8 = 56
    NUM_9 = 57
    EQUAL = 61
    G = 71
    L = 76
    O = 79  # noqa: E741
    P = 80
    R = 82
    S = 83
    U = 85
    LEFT_SHIFT = 340
    LEFT_CONTROL = 341


class MouseButton(enum.IntEnum):
    LEFT = 0
    RIGHT = 1
    MIDDLE = 2


class Action(enum.IntEnum):
    RELEASE = 0
    PRESS = 1
    REPEAT = 2


class InputHandler:
    """Turns mouse and keyboard events into camera, light and state changes."""

    def __init__(
        self,
        animation_state: AnimationState,
        display_state: DisplayState,
        scene_state: SceneState,
        camera: Camera,
        light: Light,
        on_file_open: Callable[[], None] | None = None,
        is_mouse_consumed: Callable[[], bool] | None = None,
    ) -> None:
        self.animation_state = animation_state
        self.display_state = display_state
        self.scene_state = scene_state
        self.camera = camera
        self.light = light
        self.on_file_open = on_file_open
        self._is_mouse_consumed = is_mouse_consumed or (lambda: False)
        self.last_cursor_pos = (0.0, 0.0)
        self.pressed_buttons: set[MouseButton] = set()
        self.pressed_keys: set[Key] = set()

    def _blocked(self) -> bool:
        return self.display_state.gui and self._is_mouse_consumed()

    def cursor_pos(self, x: float, y: float, window_width: int, window_height: int) -> None:
        """Tumble (left button) or pan (right button) as the cursor moves."""
        if self._blocked():
            return

        inv_w, inv_h = 1.0 / window_width, 1.0 / window_height
        dx = x - self.last_cursor_pos[0]
        dy = y - self.last_cursor_pos[1]
        left = MouseButton.LEFT in self.pressed_buttons
        right = MouseButton.RIGHT in self.pressed_buttons

        if left and not right:
            delta = (dx * math.pi * inv_w, dy * math.pi * inv_h)
            if Key.LEFT_SHIFT in self.pressed_keys:
                self.light.tumble(*delta)
            else:
                self.camera.tumble(*delta)
        elif right and not left:
            self.camera.pan(dx * inv_w, dy * inv_h)

        self.last_cursor_pos = (x, y)

    def scroll(self, x: float, y: float) -> None:
        if self._blocked():
            return
        self.camera.dolly(x, y)

    def mouse_button(self, button: int, action: int) -> None:
        if button not in (MouseButton.LEFT, MouseButton.RIGHT):
            return
        if action == Action.PRESS:
            self.pressed_buttons.add(MouseButton(button))
        else:
            self.pressed_buttons.discard(MouseButton(button))

    def key(self, key: int, action: int) -> None:
        """Track modifier keys and run shortcuts when a key is released."""
        if key in (Key.LEFT_SHIFT, Key.LEFT_CONTROL):
            if action == Action.PRESS:
                self.pressed_keys.add(Key(key))
            elif action == Action.RELEASE:
                self.pressed_keys.discard(Key(key))

        if self._blocked() or action != Action.RELEASE:
            return

        display, scene, animation = self.display_state, self.scene_state, self.animation_state
        if key == Key.O:
            if self.on_file_open is not None:
                self.on_file_open()
        elif key == Key.P:
            self.camera.reset_pivot()
        elif key == Key.U:
            display.gui = not display.gui
        elif key == Key.G:
            display.grid = not display.grid
        elif key == Key.S:
            display.skeleton = not display.skeleton
        elif key == Key.R:
            scene.auto_rotate_camera = not scene.auto_rotate_camera
        elif key == Key.MINUS:
            scene.scale = max(scene.scale // 2, _MIN_SCALE)
        elif key == Key.EQUAL:
            scene.scale = min(scene.scale * 2, _MAX_SCALE)
        elif key == Key.L:
            animation.loop = not animation.loop
        elif key == Key.SPACE:
            if animation.current_index >= 0:
                animation.playing = not animation.playing
        elif key == Key.NUM_0:
            animation.activate(-1)
        elif Key.NUM_1 <= key <= Key.NUM_9:
            animation.activate(key - Key.NUM_1)