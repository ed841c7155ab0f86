from dataclasses import dataclass
import logging

from .index import SitemapIndex
from .node_builder import get_node_builder
from .record import format_timestamp
from .serializer import SITEMAP_NS, get_declarations, to_xml
from .url_utils import SITE_URL_PLACEHOLDER, UrlUtils


logger = logging.getLogger(__name__)

# Sitemap type for each record kind, in the order they are listed in the
# sitemap index.
SITEMAP_TYPES = {
    'page': 'pages',
    'post': 'posts',
    'author': 'authors',
    'tag': 'tags',
}


class UnknownSitemapError(Exception):
    ''' Raised for a record kind or sitemap type that has no sitemap. '''


@dataclass
class SitemapEvent:
    ''' A change reported by the content source. '''
    action: str
    url: str
    record: object

    ADDED = 'added'
    REMOVED = 'removed'


class SitemapManager:
    ''' Owns one ``SitemapIndex`` per sitemap type and renders the sitemap
    index that links them together. '''

    def __init__(self, url_utils, max_nodes=None, keep_most_recent=False,
            stylesheet_url=None):
        '''
        Constructor.

        :param sitemapgen.url_utils.UrlUtils url_utils:
        :param int max_nodes: Cap for each sitemap. Uses the index default if
            not specified.
        :param bool keep_most_recent: See ``SitemapIndex``.
        :param str stylesheet_url: Optional XSL stylesheet for all documents.
        '''
        self._url_utils = url_utils
        self._stylesheet_url = stylesheet_url
        self.indexes = dict()
        for kind, type_ in SITEMAP_TYPES.items():
            kwargs = dict(keep_most_recent=keep_most_recent,
                stylesheet_url=stylesheet_url)
            if max_nodes is not None:
                kwargs['max_nodes'] = max_nodes
            self.indexes[type_] = SitemapIndex(url_utils,
                get_node_builder(kind, url_utils), **kwargs)

    @classmethod
    def from_settings(cls, settings):
        '''
        Create a manager from configuration.

        :param sitemapgen.config.SitemapSettings settings:
        '''
        url_utils = UrlUtils(settings.site_url, settings.image_path)
        stylesheet_url = None
        if settings.stylesheet:
            stylesheet_url = url_utils.url_for('page', settings.stylesheet,
                absolute=True)
        return cls(url_utils, max_nodes=settings.max_nodes,
            keep_most_recent=settings.keep_most_recent,
            stylesheet_url=stylesheet_url)

    def add_url(self, url, record):
        ''' Add a record to the sitemap for its kind. '''
        self._index_for_kind(record.kind).add_url(url, record)

    def remove_url(self, url, record):
        ''' Remove a record from the sitemap for its kind. '''
        self._index_for_kind(record.kind).remove_url(url, record)

    def handle_event(self, event):
        '''
        Apply one content source event.

        :param SitemapEvent event:
        '''
        if event.action == SitemapEvent.ADDED:
            self.add_url(event.url, event.record)
        elif event.action == SitemapEvent.REMOVED:
            self.remove_url(event.url, event.record)
        else:
            raise ValueError(f'Unknown sitemap event action: {event.action!r}')

    async def run(self, recv_channel):
        '''
        Apply events from the content source one at a time.

        :param trio.MemoryReceiveChannel recv_channel: Carries
            ``SitemapEvent`` items.
        Events that cannot be applied are logged and skipped.

        :returns: When the channel is closed.
        '''
        count = 0
        async with recv_channel:
            async for event in recv_channel:
                try:
                    self.handle_event(event)
                except (UnknownSitemapError, ValueError):
                    logger.exception('Skipping sitemap event %r', event)
                    continue
                count += 1
        logger.info('Event channel closed after applying %d events', count)

    def get_sitemap_xml(self, type_):
        '''
        Render the sitemap for one type, e.g. ``posts``.

        :rtype: str
        '''
        try:
            index = self.indexes[type_]
        except KeyError:
            raise UnknownSitemapError(f'No sitemap of type {type_!r}') from None
        return index.get_xml()

    def get_index_xml(self):
        '''
        Render the sitemap index listing every sitemap and its last modified
        time.

        :rtype: str
        '''
        entries = list()
        for type_, index in self.indexes.items():
            entries.append({
                'sitemap': [
                    {'loc': '{}/sitemap-{}.xml'.format(SITE_URL_PLACEHOLDER,
                        type_)},
                    {'lastmod': format_timestamp(index.last_modified)},
                ]
            })
        data = {
            'sitemapindex': [{'_attr': {'xmlns': SITEMAP_NS}}] + entries
        }
        xml = get_declarations(self._stylesheet_url) + to_xml(data)
        return self._url_utils.make_absolute(xml)

    def reset(self):
        ''' Reset every sitemap. '''
        for index in self.indexes.values():
            index.reset()

    def _index_for_kind(self, kind):
        try:
            return self.indexes[SITEMAP_TYPES[kind]]
        except KeyError:
            raise UnknownSitemapError(
                f'No sitemap for record kind {kind!r}') from None
