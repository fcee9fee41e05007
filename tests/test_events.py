import pytest

from quadforge.events import (
    AppRenderEvent,
    AppTickEvent,
    AppUpdateEvent,
    Event,
    EventCategory,
    EventDispatcher,
    EventType,
    KeyEvent,
    KeyPressedEvent,
    KeyReleasedEvent,
    KeyTypedEvent,
    MouseButtonEvent,
    MouseButtonPressedEvent,
    MouseButtonReleasedEvent,
    MouseMovedEvent,
    MouseScrolledEvent,
    WindowCloseEvent,
    WindowResizeEvent,
)
from quadforge.keycodes import KeyCode, MouseCode


def test_event_type_numbering_follows_declaration_order():
    assert EventType(0) is EventType.NONE
    assert EventType(1) is EventType.WINDOW_CLOSE
    assert EventType(15) is EventType.MOUSE_SCROLLED


def test_category_bits():
    assert EventCategory(1) is EventCategory.APPLICATION
    assert EventCategory(16) is EventCategory.MOUSE_BUTTON


def test_window_resize_event_fields_and_text():
    event = WindowResizeEvent(1280, 720)
    assert (event.width, event.height) == (1280, 720)
    assert str(event) == "WindowResizeEvent: 1280, 720"
    assert event.event_type is EventType.WINDOW_RESIZE
    assert WindowResizeEvent.event_type is EventType.WINDOW_RESIZE


@pytest.mark.parametrize(
    "cls, kind, name",
    [
        (WindowCloseEvent, EventType.WINDOW_CLOSE, "EventType::WindowClose"),
        (AppTickEvent, EventType.APP_TICK, "EventType::AppTick"),
        (AppUpdateEvent, EventType.APP_UPDATE, "EventType::AppUpdate"),
        (AppRenderEvent, EventType.APP_RENDER, "EventType::AppRender"),
    ],
)
def test_application_events_default_text_is_name(cls, kind, name):
    event = cls()
    assert event.event_type is kind
    assert str(event) == name
    assert event.is_in_category(EventCategory.APPLICATION)
    assert not event.is_in_category(EventCategory.INPUT)


def test_key_pressed_event_text():
    event = KeyPressedEvent(KeyCode.A, 1)
    assert event.key_code is KeyCode.A
    assert event.repeat_count == 1
    assert str(event) == "KeyPressedEvent: 65 (1 repeats)"


def test_key_released_and_typed_text():
    assert str(KeyReleasedEvent(KeyCode.ESCAPE)) == "KeyReleasedEvent: 256"
    assert str(KeyTypedEvent(KeyCode.Z)) == "KeyTypedEvent: 90"


def test_key_typed_accepts_codes_outside_enum():
    event = KeyTypedEvent(233)
    assert event.key_code == 233
    assert str(event) == "KeyTypedEvent: 233"


def test_key_events_categories():
    event = KeyReleasedEvent(KeyCode.SPACE)
    assert event.is_in_category(EventCategory.KEYBOARD)
    assert event.is_in_category(EventCategory.INPUT)
    assert not event.is_in_category(EventCategory.MOUSE)


def test_mouse_moved_text_and_fields():
    event = MouseMovedEvent(10.5, 20)
    assert (event.x, event.y) == (10.5, 20.0)
    assert str(event) == "MouseMovedEvent: (10.5, 20)"


def test_mouse_scrolled_text():
    event = MouseScrolledEvent(0, -1.5)
    assert event.y_offset == -1.5
    assert str(event) == "MouseScrolledEvent: (0, -1.5)"


def test_mouse_button_events():
    pressed = MouseButtonPressedEvent(MouseCode.BUTTON_RIGHT)
    released = MouseButtonReleasedEvent(MouseCode.BUTTON_MIDDLE)
    assert pressed.button is MouseCode.BUTTON_1
    assert str(pressed) == "MouseButtonPressedEvent: 1"
    assert str(released) == "MouseButtonReleasedEvent: 2"
    assert pressed.is_in_category(EventCategory.MOUSE | EventCategory.INPUT)
    assert not pressed.is_in_category(EventCategory.MOUSE_BUTTON)


@pytest.mark.parametrize("cls, arg", [(KeyEvent, KeyCode.A), (MouseButtonEvent, MouseCode.BUTTON_0)])
def test_base_events_cannot_be_created(cls, arg):
    with pytest.raises(TypeError):
        cls(arg)


def test_event_base_is_abstract():
    with pytest.raises(TypeError):
        Event()


def test_new_event_is_not_handled():
    assert WindowCloseEvent().handled is False


def test_dispatch_calls_matching_handler_and_records_result():
    event = MouseScrolledEvent(0.0, 2.0)
    seen = []

    def handler(e):
        seen.append(e)
        return True

    dispatcher = EventDispatcher(event)
    assert dispatcher.dispatch(MouseScrolledEvent, handler) is True
    assert seen == [event]
    assert event.handled is True


def test_dispatch_skips_other_types():
    event = WindowResizeEvent(800, 600)
    calls = []
    dispatcher = EventDispatcher(event)
    assert dispatcher.dispatch(MouseScrolledEvent, lambda e: calls.append(e) or True) is False
    assert calls == []
    assert event.handled is False


def test_dispatch_overwrites_handled_with_latest_result():
    event = KeyPressedEvent(KeyCode.W, 0)
    dispatcher = EventDispatcher(event)
    dispatcher.dispatch(KeyPressedEvent, lambda e: True)
    assert event.handled is True
    dispatcher.dispatch(KeyPressedEvent, lambda e: False)
    assert event.handled is False


def test_dispatch_distinguishes_sibling_types():
    event = KeyReleasedEvent(KeyCode.Q)
    dispatcher = EventDispatcher(event)
    assert dispatcher.dispatch(KeyPressedEvent, lambda e: True) is False
    assert dispatcher.dispatch(KeyReleasedEvent, lambda e: True) is True