from datetime import datetime, timedelta, timezone

import pytest

from . import make_record, utc
from sitemapgen.record import (
    EPOCH,
    Record,
    format_timestamp,
    last_modified_of,
    parse_timestamp,
    utc_now,
)


def test_parse_naive_datetime_is_utc():
    assert parse_timestamp(datetime(2024, 1, 2, 3, 4, 5)) == \
        utc(2024, 1, 2, 3, 4, 5)


def test_parse_iso_string_with_offset():
    parsed = parse_timestamp('2024-01-02T05:04:05+02:00')
    assert parsed == utc(2024, 1, 2, 3, 4, 5)
    assert parsed.tzinfo == timezone.utc


def test_parse_epoch_milliseconds():
    assert parse_timestamp(1_000) == EPOCH + timedelta(seconds=1)


def test_parse_empty():
    assert parse_timestamp(None) is None
    assert parse_timestamp('') is None


def test_format_timestamp():
    assert format_timestamp(utc(2024, 1, 2, 3, 4, 5, 678_900)) == \
        '2024-01-02T03:04:05.678Z'


def test_record_normalizes_timestamps():
    record = Record(id='1', updated_at='2024-01-02T03:04:05Z')
    assert record.updated_at == utc(2024, 1, 2, 3, 4, 5)
    assert record.published_at is None


def test_record_from_doc():
    record = Record.from_doc({
        'id': 'abc',
        'url': '/hello/',
        'kind': 'page',
        'created_at': '2023-05-06T07:08:09Z',
        'feature_image': 'hello.png',
        'unrelated': 'ignored',
    })
    assert record.id == 'abc'
    assert record.url == '/hello/'
    assert record.kind == 'page'
    assert record.created_at == utc(2023, 5, 6, 7, 8, 9)
    assert record.feature_image == 'hello.png'
    assert record.cover_image is None


def test_record_from_doc_requires_id():
    with pytest.raises(KeyError):
        Record.from_doc({'url': '/no-id/'})


def test_last_modified_prefers_updated_at():
    record = make_record('1', updated_at=utc(2024, 3, 1),
        published_at=utc(2024, 2, 1), created_at=utc(2024, 1, 1))
    assert last_modified_of(record) == utc(2024, 3, 1)


def test_last_modified_falls_back_to_published_then_created():
    record = make_record('1', published_at=utc(2024, 2, 1),
        created_at=utc(2024, 1, 1))
    assert last_modified_of(record) == utc(2024, 2, 1)
    record = make_record('2', created_at=utc(2024, 1, 1))
    assert last_modified_of(record) == utc(2024, 1, 1)


def test_last_modified_without_timestamps_is_now():
    record = make_record('1')
    before = utc_now()
    first = last_modified_of(record)
    second = last_modified_of(record)
    assert before <= first <= second <= utc_now()


def test_parse_malformed_string():
    assert parse_timestamp('not-a-date') is None


def test_malformed_timestamp_falls_back_to_next_field():
    record = Record.from_doc({
        'id': '1',
        'updated_at': 'not-a-date',
        'published_at': '2024-01-01T00:00:00Z',
    })
    assert record.updated_at is None
    assert last_modified_of(record) == utc(2024, 1, 1)
