"""Playback state of the animation being shown."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class AnimationState:
    """Playback state; ``current_index`` is -1 for the bind pose."""

    time: float = 0.0
    speed: int = 100  # percent
    loop: bool = True
    playing: bool = False
    current_index: int = -1
    animation_count: int = 0

    def activate(self, index: int) -> None:
        """Select an animation; a negative index selects the bind pose and stops playback."""
        if index < 0:
            self.current_index = -1
            self.time = 0.0
            self.playing = False
        elif index < self.animation_count:
            self.current_index = index
            self.time = 0.0

    def update(self, delta_time: float, duration: float) -> None:
        """Advance playback by ``delta_time`` seconds scaled by the speed."""
        if not self.playing:
            return

        self.time += delta_time * self.speed * 0.01
        if self.time > duration:
            if self.loop:
                self.time = 0.0
            else:
                self.time = duration
                self.playing = False