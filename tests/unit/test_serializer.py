import pytest

from dashboard_lib.storage.errors import ParseError
from dashboard_lib.storage.serializer import JSONEntrySerializer, StoredEntry, MS_PER_DAY


def test_create_computes_expiry_from_days():
    e = StoredEntry.create({'a': 1}, now=1000, expiration_days=2)
    assert e.created == 1000
    assert e.expires == 1000 + 2 * MS_PER_DAY
    assert e.is_expired(e.expires) is False
    assert e.is_expired(e.expires + 1) is True


def test_dump_is_compact_and_ordered():
    s = JSONEntrySerializer()
    assert s.dump(StoredEntry('é', 1, 2)) == '{"value":"é","created":1,"expires":2}'


def test_load_reads_browser_written_entry():
    s = JSONEntrySerializer()
    e = s.load('{"value":[1,2],"created":1700000000000,"expires":1702592000000}')
    assert e == StoredEntry([1, 2], 1700000000000, 1702592000000)


@pytest.mark.parametrize('raw', [
    'not json',
    '[1, 2]',
    '{"created": 1, "expires": 2}',
    '{"value": 1, "created": "yesterday", "expires": 2}',
    '{"value": 1, "created": 1}',
    '{"value": 1, "created": true, "expires": 2}',
    '{"value": 1, "created": 1, "expires": Infinity}',
    '{"value": 1, "created": NaN, "expires": 2}',
])
def test_load_rejects_invalid_wrappers(raw):
    with pytest.raises(ParseError):
        JSONEntrySerializer().load(raw)


@pytest.mark.parametrize('days', [float('inf'), float('nan'), '30', None, True])
def test_create_rejects_non_finite_or_non_numeric_days(days):
    with pytest.raises(ValueError):
        StoredEntry.create(1, now=1000, expiration_days=days)


@pytest.mark.parametrize('value', [float('nan'), float('inf'), {'nested': [float('-inf')]}])
def test_dump_refuses_values_json_cannot_represent(value):
    with pytest.raises(ValueError):
        JSONEntrySerializer().dump(StoredEntry(value, 1, 2))
