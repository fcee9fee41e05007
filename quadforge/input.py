"""Polling of keyboard and mouse state through a replaceable backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterator

from quadforge.keycodes import KeyCode, MouseCode

__all__ = [
    "MousePosition",
    "InputBackend",
    "StateInput",
    "set_backend",
    "is_key_pressed",
    "is_mouse_button_pressed",
    "get_mouse_position",
    "get_mouse_x",
    "get_mouse_y",
]


@dataclass(frozen=True)
class MousePosition:
    """Cursor position in window coordinates."""

    x: float = 0.0
    y: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


class InputBackend(ABC):
    """Source of current input state."""

    @abstractmethod
    def is_key_pressed(self, keycode: KeyCode | int) -> bool:
        """Whether the key is held down."""

    @abstractmethod
    def is_mouse_button_pressed(self, button: MouseCode | int) -> bool:
        """Whether the mouse button is held down."""

    @abstractmethod
    def mouse_position(self) -> MousePosition:
        """Current cursor position."""


class StateInput(InputBackend):
    """Backend holding input state in memory, fed by the caller."""

    def __init__(self) -> None:
        self._keys: set[KeyCode] = set()
        self._buttons: set[MouseCode] = set()
        self._position = MousePosition()

    def press_key(self, keycode: KeyCode | int) -> None:
        self._keys.add(KeyCode(keycode))

    def release_key(self, keycode: KeyCode | int) -> None:
        self._keys.discard(KeyCode(keycode))

    def press_button(self, button: MouseCode | int) -> None:
        self._buttons.add(MouseCode(button))

    def release_button(self, button: MouseCode | int) -> None:
        self._buttons.discard(MouseCode(button))

    def move_mouse(self, x: float, y: float) -> None:
        self._position = MousePosition(float(x), float(y))

    def is_key_pressed(self, keycode: KeyCode | int) -> bool:
        return KeyCode(keycode) in self._keys

    def is_mouse_button_pressed(self, button: MouseCode | int) -> bool:
        return MouseCode(button) in self._buttons

    def mouse_position(self) -> MousePosition:
        return self._position


_backend: InputBackend = StateInput()


def set_backend(backend: InputBackend) -> InputBackend:
    """Install the backend used by the polling functions; return the previous one."""
    global _backend
    if not isinstance(backend, InputBackend):
        raise TypeError(f"expected an InputBackend, got {type(backend).__name__}")
    previous, _backend = _backend, backend
    return previous


def is_key_pressed(keycode: KeyCode | int) -> bool:
    return _backend.is_key_pressed(keycode)


def is_mouse_button_pressed(button: MouseCode | int) -> bool:
    return _backend.is_mouse_button_pressed(button)


def get_mouse_position() -> MousePosition:
    return _backend.mouse_position()


def get_mouse_x() -> float:
    return get_mouse_position().x


def get_mouse_y() -> float:
    return get_mouse_position().y