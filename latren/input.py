"""Keyboard and mouse state shared between the window and game threads."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Generic, TypeVar

T = TypeVar("T")


class SpecialKey(Enum):
    NONE = auto()
    BACKSPACE = auto()
    ENTER = auto()


class KeyboardEventType(Enum):
    NONE = auto()
    TEXT_INPUT_ASCII_CHAR = auto()
    TEXT_INPUT_SPECIAL = auto()


@dataclass(frozen=True)
class KeyboardEvent:
    special: SpecialKey = SpecialKey.NONE
    character: str = ""


class KeyState(Enum):
    UP = auto()
    DOWN = auto()
    PRESSED_DOWN = auto()
    RELEASED = auto()


class ReceiveInteraction(Enum):
    """Interactions from the window thread, received by the game thread."""

    VSYNC_POLL_RATE_CHANGING = 0
    WINDOW_SIZE_CHANGE = 1
    SET_FULLSCREEN = 2
    MOUSE_MOVE = 3


class SendInteraction(Enum):
    """Interactions sent to the window thread by the game thread."""

    UPDATE_FULLSCREEN = 0
    CURSOR_MODE_CHANGE = 1
    FOCUS_CONSOLE = 2
    FOCUS_WINDOW = 3


class Atomic(Generic[T]):
    """A value read and written under a lock."""

    def __init__(self, value: T | None = None) -> None:
        self._lock = threading.Lock()
        self._value = value

    def get(self) -> T | None:
        with self._lock:
            return self._value

    def set(self, value: T) -> None:
        with self._lock:
            self._value = value

    def __copy__(self) -> "Atomic[T]":
        return Atomic(self.get())

    def __repr__(self) -> str:
        return f"Atomic({self.get()!r})"


class KeyInputListener:
    """Tracks key states; changes become visible on the next poll."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._keys_before_poll: dict[int, KeyState] = {}
        self._keys: dict[int, KeyState] = {}

    def poll(self) -> None:
        """Make the states recorded since the last poll visible."""
        with self._lock:
            self._keys = dict(self._keys_before_poll)

    def update_states(self) -> None:
        """Turn one-frame states into lasting ones."""
        with self._lock:
            for key, state in list(self._keys.items()):
                if state is KeyState.PRESSED_DOWN:
                    self._keys_before_poll[key] = KeyState.DOWN
                    self._keys[key] = KeyState.DOWN
                elif state is KeyState.RELEASED:
                    self._keys_before_poll[key] = KeyState.UP
                    self._keys[key] = KeyState.UP

    def press(self, key: int) -> None:
        with self._lock:
            self._keys_before_poll[key] = KeyState.PRESSED_DOWN

    def release(self, key: int) -> None:
        with self._lock:
            self._keys_before_poll[key] = KeyState.RELEASED

    def state(self, key: int) -> KeyState:
        return self._keys.get(key, KeyState.UP)

    def is_down(self, key: int) -> bool:
        return self.state(key) in (KeyState.DOWN, KeyState.PRESSED_DOWN)

    def is_pressed_down(self, key: int) -> bool:
        return self.state(key) is KeyState.PRESSED_DOWN

    def is_released(self, key: int) -> bool:
        return self.state(key) is KeyState.RELEASED

    def copy(self) -> "KeyInputListener":
        """Return a listener whose visible states are this one's pending states."""
        other = KeyInputListener()
        with self._lock:
            other._keys_before_poll = dict(self._keys_before_poll)
            other._keys = dict(self._keys_before_poll)
        return other

    __copy__ = copy


def _flag() -> Atomic[bool]:
    return Atomic(False)


@dataclass
class InputSystem:
    """Connects the input (window) thread with the game thread."""

    keyboard_listener: KeyInputListener = field(default_factory=KeyInputListener)
    mouse_button_listener: KeyInputListener = field(default_factory=KeyInputListener)

    window_size_change_pending: Atomic[bool] = field(default_factory=_flag)
    set_fullscreen_pending: Atomic[bool] = field(default_factory=_flag)
    update_fullscreen: bool = False

    mouse_move_pending: Atomic[bool] = field(default_factory=_flag)
    mouse_pos_x: Atomic[float] = field(default_factory=lambda: Atomic(0.0))
    mouse_pos_y: Atomic[float] = field(default_factory=lambda: Atomic(0.0))
    first_mouse_interaction: Atomic[bool] = field(default_factory=_flag)
    mouse_scroll_pending: Atomic[bool] = field(default_factory=_flag)
    mouse_scroll_amount: Atomic[float] = field(default_factory=lambda: Atomic(0.0))

    is_mouse_locked: Atomic[bool] = field(default_factory=_flag)
    cursor_mode_change_pending: Atomic[bool] = field(default_factory=_flag)
    cursor_change_pending: Atomic[bool] = field(default_factory=_flag)
    cursor_type: Atomic[int] = field(default_factory=lambda: Atomic(0))
    vsync_poll_rate_change_pending: Atomic[bool] = field(default_factory=_flag)
    window_focus_pending: Atomic[bool] = field(default_factory=_flag)
    console_focus_pending: Atomic[bool] = field(default_factory=_flag)

    keyboard_event: Atomic[KeyboardEvent] = field(
        default_factory=lambda: Atomic(KeyboardEvent())
    )
    keyboard_event_type: Atomic[KeyboardEventType] = field(
        default_factory=lambda: Atomic(KeyboardEventType.NONE)
    )