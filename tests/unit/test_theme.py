import pytest

from dashboard_lib.events import EventBus, THEME_CHANGED
from dashboard_lib.preferences import ThemeManager
from dashboard_lib.storage import ExpiringStore, MemoryStorage


def _manager(prefers_dark=True, **kwargs):
    store = ExpiringStore(MemoryStorage())
    return ThemeManager(store, prefers_dark=lambda: prefers_dark, **kwargs), store


def test_default_theme_when_nothing_stored():
    mgr, _ = _manager()
    assert mgr.get_current_theme() == 'dark'
    mgr, _ = _manager(default_theme='light')
    assert mgr.get_current_theme() == 'light'


def test_apply_persists_and_returns_css_variables():
    mgr, store = _manager()
    css = mgr.apply_theme('light')
    assert store.get('mserv_theme_preference') == 'light'
    assert css['--bg-primary'] == '#f5f5f7'
    assert css['--accent-color'] == '#7371fc'


def test_system_theme_is_stored_but_resolved_for_listeners():
    mgr, store = _manager(prefers_dark=False)
    seen = []
    mgr.add_theme_listener(seen.append)
    css = mgr.apply_theme('system')
    assert store.get('mserv_theme_preference') == 'system'
    assert seen == ['light']
    assert css['--bg-primary'] == '#f5f5f7'


def test_toggle_cycles_light_dark_system():
    mgr, _ = _manager()
    mgr.apply_theme('light')
    assert mgr.toggle_theme() == 'dark'
    assert mgr.toggle_theme() == 'system'
    assert mgr.toggle_theme() == 'light'


def test_failing_listener_is_isolated():
    mgr, _ = _manager()
    seen = []

    def broken(theme):
        raise RuntimeError('boom')

    mgr.add_theme_listener(broken)
    mgr.add_theme_listener(seen.append)
    mgr.apply_theme('dark')
    assert seen == ['dark']
    mgr.remove_theme_listener(seen.append)
    mgr.apply_theme('light')
    assert seen == ['dark']


def test_event_bus_receives_theme_changes():
    events = EventBus()
    store = ExpiringStore(MemoryStorage())
    mgr = ThemeManager(store, events=events, prefers_dark=lambda: True)
    seen = []
    events.on(THEME_CHANGED, seen.append)
    mgr.apply_theme('system')
    assert seen == [{'theme': 'system', 'resolved': 'dark'}]


def test_unknown_theme_rejected_and_ignored_when_stored():
    mgr, store = _manager()
    with pytest.raises(ValueError):
        mgr.apply_theme('sepia')
    store.set('mserv_theme_preference', 'sepia')
    assert mgr.get_current_theme() == 'dark'


def test_reset_removes_preference():
    mgr, store = _manager()
    mgr.apply_theme('light')
    mgr.reset()
    assert mgr.get_current_theme() == 'dark'
