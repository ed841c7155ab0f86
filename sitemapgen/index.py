'''
The in-memory sitemap index.

Records are added and removed as the content source reports them. Each add
renders the record's ``<url>`` node once and stores it with the record's last
modified instant. The XML document is rendered lazily on the first
``get_xml()`` after a mutation and cached until the next one.
'''
import logging
import threading

from .node_builder import NodeBuilder
from .record import EPOCH, last_modified_of, utc_now
from .serializer import IMAGE_NS, SITEMAP_NS, get_declarations, to_xml


logger = logging.getLogger(__name__)
MAX_NODES = 50_000

# Namespace declarations for the urlset root.
XMLNS_DECLS = {
    '_attr': {
        'xmlns': SITEMAP_NS,
        'xmlns:image': IMAGE_NS,
    }
}


class SitemapIndex:
    ''' Maintains the nodes for one sitemap and renders them to XML. '''

    def __init__(self, url_utils, node_builder=None, max_nodes=MAX_NODES,
            keep_most_recent=False, stylesheet_url=None):
        '''
        Constructor.

        :param sitemapgen.url_utils.UrlUtils url_utils: Used to resolve image
            references and to make rendered URLs absolute.
        :param sitemapgen.node_builder.NodeBuilder node_builder: Builds the
            node for each record. Defaults to the generic builder.
        :param int max_nodes: The maximum number of ``<url>`` entries in the
            rendered document. Zero or ``None`` disables the cap.
        :param bool keep_most_recent: If false (the default), the node list is
            capped in insertion order before it is sorted by recency. If true,
            it is sorted first so that the most recent ``max_nodes`` survive.
        :param str stylesheet_url: Optional XSL stylesheet referenced from the
            document prolog.
        '''
        self.nodes = dict()
        self.node_timestamps = dict()
        self.cached_document = None
        self.last_modified = EPOCH
        self.max_nodes = max_nodes
        self._keep_most_recent = keep_most_recent
        self._lock = threading.Lock()
        self._node_builder = node_builder or NodeBuilder(url_utils)
        self._stylesheet_url = stylesheet_url
        self._url_utils = url_utils

    def __contains__(self, record_id):
        return record_id in self.nodes

    def __len__(self):
        return len(self.nodes)

    def __repr__(self):
        return '<SitemapIndex nodes={} cached={}>'.format(len(self.nodes),
            self.cached_document is not None)

    def add_url(self, url, record):
        '''
        Add or replace the node for ``record``.

        :param str url: The record's canonical URL.
        :param sitemapgen.record.Record record:
        '''
        lastmod = last_modified_of(record)
        node = self._node_builder.build_node(url, record, lastmod)
        if not node:
            logger.debug('No sitemap node for record %s', record.id)
            return

        with self._lock:
            if lastmod > self.last_modified:
                self.last_modified = lastmod
            # The content source has no update event: updates arrive as a
            # remove followed by an add, so an add simply overwrites.
            self.nodes[record.id] = node
            self.node_timestamps[record.id] = lastmod
            self.invalidate()
        logger.debug('Added %s to sitemap (id=%s)', url, record.id)

    def remove_url(self, url, record):
        '''
        Remove the node for ``record``. Removing an unknown record is not an
        error.

        :param str url: The record's canonical URL.
        :param sitemapgen.record.Record record:
        '''
        with self._lock:
            self.nodes.pop(record.id, None)
            self.node_timestamps.pop(record.id, None)
            self.invalidate()
            # Not recomputed from the remaining records.
            self.last_modified = utc_now()
        logger.debug('Removed %s from sitemap (id=%s)', url, record.id)

    def get_xml(self):
        '''
        Return the sitemap document, rendering it if a mutation happened since
        the last call.

        :rtype: str
        '''
        with self._lock:
            if self.cached_document:
                return self.cached_document
            content = self._render()
            self.cached_document = content
            return content

    def invalidate(self):
        ''' Drop the cached document. '''
        self.cached_document = None

    def reset(self):
        ''' Remove every node, e.g. before a full rebuild. The collection's
        last modified time is kept. '''
        with self._lock:
            self.nodes = dict()
            self.node_timestamps = dict()
            self.invalidate()

    def _render(self):
        ''' Render the current nodes, newest first. Caller holds the lock. '''
        entries = [
            (id_, -self.node_timestamps[id_].timestamp(), node)
            for id_, node in self.nodes.items()
        ]

        if self._keep_most_recent:
            entries.sort(key=lambda entry: entry[1])
            if self.max_nodes:
                entries = entries[:self.max_nodes]
        else:
            # Capped in insertion order, so once there are more than
            # max_nodes records the survivors are not necessarily the newest.
            if self.max_nodes:
                entries = entries[:self.max_nodes]
            entries.sort(key=lambda entry: entry[1])

        if self.max_nodes and len(self.nodes) > self.max_nodes:
            logger.warning('Sitemap truncated to %d of %d nodes',
                self.max_nodes, len(self.nodes))

        data = {
            'urlset': [XMLNS_DECLS] + [node for _, _, node in entries]
        }
        xml = get_declarations(self._stylesheet_url) + to_xml(data)
        xml = self._url_utils.make_absolute(xml)
        logger.debug('Rendered sitemap with %d nodes', len(entries))
        return xml
