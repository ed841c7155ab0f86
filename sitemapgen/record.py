'''
Content records supplied by the upstream content source, and the timestamp
helpers that derive a record's "last modified" instant.
'''
from dataclasses import dataclass
from datetime import datetime, timezone
import logging

import dateutil.parser


logger = logging.getLogger(__name__)
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
TIMESTAMP_FIELDS = ('updated_at', 'published_at', 'created_at')


def utc_now():
    ''' Current wall-clock instant as an aware UTC datetime. '''
    return datetime.now(timezone.utc)


def parse_timestamp(value):
    '''
    Convert a timestamp field to an aware UTC datetime.

    Accepts datetimes (naive ones are treated as UTC), ISO-8601 strings and
    epoch milliseconds. Empty and unparseable values return ``None``.

    :param value: A datetime, str, int or float.
    :rtype: datetime or None
    '''
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, (int, float)):
        dt = datetime.fromtimestamp(value / 1000, timezone.utc)
    else:
        try:
            dt = dateutil.parser.isoparse(value)
        except (ValueError, TypeError, OverflowError):
            logger.warning('Ignoring malformed timestamp: %r', value)
            return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_timestamp(dt):
    ''' Format a datetime as sitemap ``lastmod`` text, e.g.
    ``2024-01-02T03:04:05.000Z``. '''
    dt = parse_timestamp(dt)
    return dt.isoformat(timespec='milliseconds').replace('+00:00', 'Z')


@dataclass
class Record:
    ''' A content item as emitted by the content source. '''
    id: str
    url: str = ''
    kind: str = 'post'
    updated_at: datetime = None
    published_at: datetime = None
    created_at: datetime = None
    cover_image: str = None
    profile_image: str = None
    feature_image: str = None

    def __post_init__(self):
        for field in TIMESTAMP_FIELDS:
            setattr(self, field, parse_timestamp(getattr(self, field)))

    @classmethod
    def from_doc(cls, doc):
        '''
        Create a record from a plain document, e.g. one line of a JSON export.

        :param dict doc: Must contain ``id``. Unknown keys are ignored.
        '''
        return cls(
            id=doc['id'],
            url=doc.get('url', ''),
            kind=doc.get('kind', 'post'),
            updated_at=doc.get('updated_at'),
            published_at=doc.get('published_at'),
            created_at=doc.get('created_at'),
            cover_image=doc.get('cover_image'),
            profile_image=doc.get('profile_image'),
            feature_image=doc.get('feature_image'),
        )


def last_modified_of(record):
    '''
    Return the first non-empty of ``updated_at``, ``published_at`` and
    ``created_at``. A record with none of them gets the current time, which
    is not remembered between calls.

    :param Record record:
    :rtype: datetime
    '''
    for field in TIMESTAMP_FIELDS:
        value = getattr(record, field)
        if value:
            return parse_timestamp(value)
    return utc_now()
