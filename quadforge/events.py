"""Window, application, keyboard and mouse events, and type-based dispatch."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import IntEnum, IntFlag
from typing import Callable, TypeVar

from quadforge.keycodes import KeyCode, MouseCode

__all__ = [
    "EventType",
    "EventCategory",
    "Event",
    "WindowResizeEvent",
    "WindowCloseEvent",
    "AppTickEvent",
    "AppUpdateEvent",
    "AppRenderEvent",
    "KeyEvent",
    "KeyPressedEvent",
    "KeyReleasedEvent",
    "KeyTypedEvent",
    "MouseMovedEvent",
    "MouseScrolledEvent",
    "MouseButtonEvent",
    "MouseButtonPressedEvent",
    "MouseButtonReleasedEvent",
    "EventDispatcher",
]


class EventType(IntEnum):
    """Concrete kind of an event."""

    NONE = 0
    WINDOW_CLOSE = 1
    WINDOW_RESIZE = 2
    WINDOW_FOCUS = 3
    WINDOW_LOST_FOCUS = 4
    WINDOW_MOVED = 5
    APP_TICK = 6
    APP_UPDATE = 7
    APP_RENDER = 8
    KEY_PRESSED = 9
    KEY_RELEASED = 10
    KEY_TYPED = 11
    MOUSE_BUTTON_PRESSED = 12
    MOUSE_BUTTON_RELEASED = 13
    MOUSE_MOVED = 14
    MOUSE_SCROLLED = 15


class EventCategory(IntFlag):
    """Bit flags grouping events so listeners can filter them."""

    NONE = 0
    APPLICATION = 1 << 0
    INPUT = 1 << 1
    KEYBOARD = 1 << 2
    MOUSE = 1 << 3
    MOUSE_BUTTON = 1 << 4


def _format_float(value: float) -> str:
    """Shortest text for a float, without a trailing '.0'."""
    text = repr(float(value))
    return text[:-2] if text.endswith(".0") else text


def _as_key(code: KeyCode | int) -> KeyCode | int:
    try:
        return KeyCode(code)
    except ValueError:
        return int(code)


def _as_button(code: MouseCode | int) -> MouseCode | int:
    try:
        return MouseCode(code)
    except ValueError:
        return int(code)


class Event(ABC):
    """Base of all events; subclasses fix the type, name and categories."""

    handled: bool

    def __init__(self) -> None:
        self.handled = False

    @property
    @abstractmethod
    def event_type(self) -> EventType:
        """The kind of this event."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used for debugging output."""

    @property
    @abstractmethod
    def category_flags(self) -> EventCategory:
        """Categories this event belongs to."""

    def is_in_category(self, category: EventCategory | int) -> bool:
        """Whether any of the given category bits are set for this event."""
        return bool(self.category_flags & category)

    def __str__(self) -> str:
        return self.name


class WindowResizeEvent(Event):
    event_type = EventType.WINDOW_RESIZE
    name = "EventType::WindowResize"
    category_flags = EventCategory.APPLICATION

    def __init__(self, width: int, height: int) -> None:
        super().__init__()
        self.width = int(width)
        self.height = int(height)

    def __str__(self) -> str:
        return f"WindowResizeEvent: {self.width}, {self.height}"


class WindowCloseEvent(Event):
    event_type = EventType.WINDOW_CLOSE
    name = "EventType::WindowClose"
    category_flags = EventCategory.APPLICATION


class AppTickEvent(Event):
    event_type = EventType.APP_TICK
    name = "EventType::AppTick"
    category_flags = EventCategory.APPLICATION


class AppUpdateEvent(Event):
    event_type = EventType.APP_UPDATE
    name = "EventType::AppUpdate"
    category_flags = EventCategory.APPLICATION


class AppRenderEvent(Event):
    event_type = EventType.APP_RENDER
    name = "EventType::AppRender"
    category_flags = EventCategory.APPLICATION


class KeyEvent(Event):
    """Base for keyboard events; not instantiable on its own."""

    category_flags = EventCategory.KEYBOARD | EventCategory.INPUT

    def __init__(self, key_code: KeyCode | int) -> None:
        super().__init__()
        self.key_code = _as_key(key_code)


class KeyPressedEvent(KeyEvent):
    event_type = EventType.KEY_PRESSED
    name = "EventType::KeyPressed"

    def __init__(self, key_code: KeyCode | int, repeat_count: int) -> None:
        super().__init__(key_code)
        self.repeat_count = int(repeat_count)

    def __str__(self) -> str:
        return f"KeyPressedEvent: {int(self.key_code)} ({self.repeat_count} repeats)"


class KeyReleasedEvent(KeyEvent):
    event_type = EventType.KEY_RELEASED
    name = "EventType::KeyReleased"

    def __str__(self) -> str:
        return f"KeyReleasedEvent: {int(self.key_code)}"


class KeyTypedEvent(KeyEvent):
    event_type = EventType.KEY_TYPED
    name = "EventType::KeyTyped"

    def __str__(self) -> str:
        return f"KeyTypedEvent: {int(self.key_code)}"


class MouseMovedEvent(Event):
    event_type = EventType.MOUSE_MOVED
    name = "EventType::MouseMoved"
    category_flags = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, x: float, y: float) -> None:
        super().__init__()
        self.x = float(x)
        self.y = float(y)

    def __str__(self) -> str:
        return f"MouseMovedEvent: ({_format_float(self.x)}, {_format_float(self.y)})"


class MouseScrolledEvent(Event):
    event_type = EventType.MOUSE_SCROLLED
    name = "EventType::MouseScrolled"
    category_flags = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, x_offset: float, y_offset: float) -> None:
        super().__init__()
        self.x_offset = float(x_offset)
        self.y_offset = float(y_offset)

    def __str__(self) -> str:
        return (
            f"MouseScrolledEvent: ({_format_float(self.x_offset)}, "
            f"{_format_float(self.y_offset)})"
        )


class MouseButtonEvent(Event):
    """Base for mouse button events; not instantiable on its own."""

    category_flags = EventCategory.MOUSE | EventCategory.INPUT

    def __init__(self, button: MouseCode | int) -> None:
        super().__init__()
        self.button = _as_button(button)


class MouseButtonPressedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_PRESSED
    name = "EventType::MouseButtonPressed"

    def __str__(self) -> str:
        return f"MouseButtonPressedEvent: {int(self.button)}"


class MouseButtonReleasedEvent(MouseButtonEvent):
    event_type = EventType.MOUSE_BUTTON_RELEASED
    name = "EventType::MouseButtonReleased"

    def __str__(self) -> str:
        return f"MouseButtonReleasedEvent: {int(self.button)}"


E = TypeVar("E", bound=Event)


class EventDispatcher:
    """Routes one event to handlers registered for its concrete type."""

    def __init__(self, event: Event) -> None:
        self._event = event

    def dispatch(self, event_class: type[E], func: Callable[[E], bool]) -> bool:
        """Call func if the event is of event_class's type; record its result as handled.

        Returns whether the handler was called.
        """
        if self._event.event_type == event_class.event_type:
            self._event.handled = bool(func(self._event))  # type: ignore[arg-type]
            return True
        return False