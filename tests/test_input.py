import copy
import threading

from latren.input import (
    Atomic,
    InputSystem,
    KeyboardEvent,
    KeyboardEventType,
    KeyInputListener,
    KeyState,
    SpecialKey,
)

KEY = 65


def test_unknown_key_is_up():
    listener = KeyInputListener()
    assert listener.state(KEY) is KeyState.UP
    assert not listener.is_down(KEY)


def test_press_is_invisible_until_poll():
    listener = KeyInputListener()
    listener.press(KEY)
    assert listener.state(KEY) is KeyState.UP
    listener.poll()
    assert listener.is_pressed_down(KEY)
    assert listener.is_down(KEY)


def test_update_states_turns_press_into_down():
    listener = KeyInputListener()
    listener.press(KEY)
    listener.poll()
    listener.update_states()
    assert listener.state(KEY) is KeyState.DOWN
    assert listener.is_down(KEY)
    assert not listener.is_pressed_down(KEY)
    listener.poll()
    assert listener.state(KEY) is KeyState.DOWN


def test_release_cycle():
    listener = KeyInputListener()
    listener.press(KEY)
    listener.poll()
    listener.update_states()
    listener.release(KEY)
    listener.poll()
    assert listener.is_released(KEY)
    assert not listener.is_down(KEY)
    listener.update_states()
    assert listener.state(KEY) is KeyState.UP
    listener.poll()
    assert listener.state(KEY) is KeyState.UP


def test_copy_exposes_pending_states():
    listener = KeyInputListener()
    listener.press(KEY)
    duplicate = listener.copy()
    assert listener.state(KEY) is KeyState.UP
    assert duplicate.state(KEY) is KeyState.PRESSED_DOWN
    duplicate.release(KEY)
    listener.poll()
    assert listener.is_pressed_down(KEY)


def test_copy_module_uses_listener_copy():
    listener = KeyInputListener()
    listener.press(KEY)
    assert copy.copy(listener).is_pressed_down(KEY)


def test_concurrent_presses_are_all_recorded():
    listener = KeyInputListener()
    threads = [threading.Thread(target=listener.press, args=(k,)) for k in range(50)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    listener.poll()
    assert all(listener.is_pressed_down(k) for k in range(50))


def test_atomic_get_set():
    value = Atomic(1)
    assert value.get() == 1
    value.set(7)
    assert value.get() == 7
    assert copy.copy(value).get() == 7


def test_input_system_defaults():
    system = InputSystem()
    assert system.mouse_move_pending.get() is False
    assert system.keyboard_event_type.get() is KeyboardEventType.NONE
    assert system.keyboard_event.get() == KeyboardEvent(SpecialKey.NONE, "")


def test_input_system_instances_do_not_share_state():
    first, second = InputSystem(), InputSystem()
    first.is_mouse_locked.set(True)
    first.keyboard_listener.press(KEY)
    first.keyboard_listener.poll()
    assert second.is_mouse_locked.get() is False
    assert second.keyboard_listener.state(KEY) is KeyState.UP