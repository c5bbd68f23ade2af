import pytest

from dashboard_lib.events import EventBus, LAYOUTS_UPDATED
from dashboard_lib.preferences import LayoutManager, LayoutSection
from dashboard_lib.preferences.layouts import default_layout
from dashboard_lib.storage import ExpiringStore, MemoryStorage
from tests.helpers import FakeClock, T0


def _manager(**kwargs):
    store = ExpiringStore(MemoryStorage())
    events = EventBus()
    updates = []
    events.on(LAYOUTS_UPDATED, updates.append)
    clock = FakeClock()
    return LayoutManager(store, events=events, clock=clock, **kwargs), store, updates, clock


def test_load_without_stored_layouts_has_only_default():
    mgr, _, updates, _ = _manager()
    layouts = mgr.load()
    assert [layout.id for layout in layouts] == ['default']
    assert mgr.active_layout() == default_layout()
    assert updates == []


def test_create_select_and_reload():
    mgr, store, updates, clock = _manager()
    mgr.load()
    created = mgr.create('  Media wall ')
    assert created.id == f'layout-{T0}'
    assert created.name == 'Media wall'
    assert [s.id for s in created.sections] == ['favorites', 'categories']
    assert mgr.active_layout_id == created.id

    stored = store.get('mserv_layout')
    assert stored['activeId'] == created.id
    assert [layout['id'] for layout in stored['layouts']] == ['default', created.id]
    assert stored['layouts'][1]['sections'][0] == {
        'id': 'favorites', 'title': 'Favorites', 'type': 'favorites',
        'position': {'row': 1, 'column': 1}, 'size': {'width': 2, 'height': 1},
    }
    assert updates[-1] == stored

    assert mgr.select('default') is True
    assert mgr.select('ghost') is False

    other = LayoutManager(store)
    other.load()
    assert [layout.id for layout in other.layouts] == ['default', created.id]
    assert other.active_layout_id == 'default'


def test_create_generates_unique_ids_on_same_tick():
    mgr, _, _, _ = _manager()
    mgr.load()
    a = mgr.create('A')
    b = mgr.create('B')
    assert a.id != b.id


def test_create_requires_a_name():
    mgr, _, _, _ = _manager()
    with pytest.raises(ValueError):
        mgr.create('   ')


def test_default_layout_cannot_be_deleted():
    mgr, store, _, _ = _manager()
    mgr.load()
    assert mgr.delete_current() is False
    assert store.get('mserv_layout') is None


def test_delete_current_falls_back_to_default():
    mgr, store, _, _ = _manager()
    mgr.load()
    created = mgr.create('Temporary')
    assert mgr.delete_current() is True
    assert mgr.active_layout_id == 'default'
    assert mgr.get(created.id) is None
    assert [layout['id'] for layout in store.get('mserv_layout')['layouts']] == ['default']


def test_load_rebuilds_default_and_skips_invalid_entries():
    mgr, store, _, _ = _manager()
    store.set('mserv_layout', {
        'layouts': [
            {'id': 'default', 'name': 'Tampered', 'sections': []},
            {'id': 'layout-1', 'name': 'Kept', 'sections': [{'id': 'favorites', 'position': 'bad'}]},
            {'name': 'no id'},
            'garbage',
        ],
        'activeId': 'layout-1',
    })
    mgr.load()
    assert [layout.id for layout in mgr.layouts] == ['default', 'layout-1']
    assert mgr.get('default').name == 'Default layout'
    assert mgr.get('layout-1').sections[0].row == 1
    assert mgr.active_layout_id == 'layout-1'


@pytest.mark.parametrize('stored', [['a list'], {'layouts': 7, 'activeId': 'layout-9'}])
def test_load_tolerates_malformed_documents(stored):
    mgr, store, _, _ = _manager()
    store.set('mserv_layout', stored)
    mgr.load()
    assert [layout.id for layout in mgr.layouts] == ['default']
    assert mgr.active_layout_id == 'default'


def test_sections_are_edited_on_custom_layouts_only():
    mgr, store, _, _ = _manager(max_sections=3)
    mgr.load()
    widgets = LayoutSection('widgets', 'Widgets', 'widgets')
    assert mgr.add_section(widgets) is False

    mgr.create('Custom')
    assert mgr.add_section(widgets) is True
    assert mgr.add_section(widgets) is False
    assert mgr.add_section(LayoutSection('recent', 'Recent', 'recent')) is False

    assert mgr.resize_section('widgets', '2x1') is True
    section = mgr.active_layout().find_section('widgets')
    assert (section.width, section.height) == (2, 1)
    assert mgr.resize_section('ghost', '1x1') is False
    with pytest.raises(ValueError):
        mgr.resize_section('widgets', '3x3')

    assert mgr.remove_section('favorites') is True
    assert mgr.remove_section('favorites') is False
    saved = store.get('mserv_layout')['layouts'][1]['sections']
    assert [s['id'] for s in saved] == ['categories', 'widgets']
    assert saved[1]['size'] == {'width': 2, 'height': 1}
