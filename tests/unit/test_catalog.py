import pytest

from dashboard_lib.catalog import CatalogService, Service, score_service
from tests.helpers import make_catalog


def test_lookup_and_grouping():
    catalog = make_catalog()
    assert catalog.get_service_by_id('jellyfin').name == 'Jellyfin'
    assert catalog.get_service_by_id('missing') is None
    assert [s.id for s in catalog.services_in_category('media')] == ['jellyfin', 'navidrome']
    # category without an explicit list collects by the service's category field
    assert [s.id for s in catalog.services_in_category('monitoring')] == ['portainer', 'dozzle']
    # unknown category falls back to the raw category field
    assert [s.id for s in catalog.services_in_category('management')] == ['radarr']


def test_score_service_weights():
    s = Service(id='j', name='Jellyfin', url='', description='Media server')
    assert score_service(s, 'jellyfin') == 10 + 5 + 3
    assert score_service(s, 'jelly') == 5 + 3
    assert score_service(s, 'fin') == 3
    assert score_service(s, 'server') == 2
    assert score_service(s, 'plex') == 0


def test_search_orders_and_highlights():
    catalog = make_catalog()
    hits = catalog.search('  Server ')
    assert [h.service.id for h in hits] == ['jellyfin', 'navidrome']
    assert all(h.highlighted is False for h in hits)

    hits = catalog.search('dozzle')
    assert [(h.service.id, h.score, h.highlighted) for h in hits] == [('dozzle', 18, True)]


def test_empty_query_resets_search():
    catalog = make_catalog()
    hits = catalog.search('   ')
    assert len(hits) == len(catalog.list_services())
    assert all(h.score == 0 and not h.highlighted for h in hits)


def test_visible_categories():
    catalog = make_catalog()
    assert [c.id for c in catalog.visible_categories('docker')] == ['monitoring']
    assert catalog.visible_categories('nothing-matches') == []


def test_unknown_category_members_are_dropped():
    catalog = CatalogService.from_dict({
        'categories': [{'id': 'media', 'name': 'Media', 'services': ['jellyfin', 'ghost']}],
        'services': [{'id': 'jellyfin', 'name': 'Jellyfin', 'url': 'x'}],
    })
    assert catalog.list_categories()[0].services == ['jellyfin']


def test_invalid_entries_raise():
    with pytest.raises(ValueError):
        CatalogService.from_dict({'services': [{'name': 'No id'}]})
    with pytest.raises(ValueError):
        CatalogService.from_dict(['not', 'a', 'mapping'])


def test_from_file(tmp_path):
    p = tmp_path / 'services.yml'
    p.write_text('services:\n  - id: gitea\n    name: Gitea\n    url: https://git.example\n', encoding='utf-8')
    catalog = CatalogService.from_file(p)
    assert catalog.to_dict()['services'][0]['id'] == 'gitea'

    bad = tmp_path / 'bad.yml'
    bad.write_text('services: [unclosed', encoding='utf-8')
    with pytest.raises(ValueError):
        CatalogService.from_file(bad)
