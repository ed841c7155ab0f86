import logging

from yarl import URL

from .record import format_timestamp, last_modified_of


logger = logging.getLogger(__name__)


class NodeBuilder:
    '''
    Builds the ``<url>`` node for a record.

    Record kinds differ in which image fields they carry, so each kind gets a
    builder with its own ``image_fields``. Subclasses may also override
    ``validate_image_url()``.
    '''
    image_fields = ('cover_image', 'profile_image', 'feature_image')

    def __init__(self, url_utils):
        '''
        Constructor.

        :param sitemapgen.url_utils.UrlUtils url_utils: Resolves image
            references to absolute URLs.
        '''
        self._url_utils = url_utils

    def __repr__(self):
        return '<{} fields={}>'.format(type(self).__name__,
            ','.join(self.image_fields))

    def build_node(self, url, record, lastmod=None):
        '''
        Create the node for ``record``.

        :param str url: The record's canonical URL.
        :param sitemapgen.record.Record record:
        :param datetime lastmod: The derived last modified instant, if the
            caller already has it.
        :returns: A node in serializer form, or ``None`` if no node can be
            built.
        :rtype: dict
        '''
        if not url:
            return None
        if lastmod is None:
            lastmod = last_modified_of(record)
        node = {
            'url': [
                {'loc': url},
                {'lastmod': format_timestamp(lastmod)},
            ]
        }
        image_node = self.build_image_node(record)
        if image_node:
            node['url'].append(image_node)
        return node

    def build_image_node(self, record):
        ''' Create the ``image:image`` node, or ``None`` if the record has no
        usable image. '''
        image = self.image_ref(record)
        if not image:
            return None

        image_url = self._url_utils.url_for('image', image, absolute=True)
        if not self.validate_image_url(image_url):
            logger.debug('Omitting image %r for record %s', image, record.id)
            return None

        return {
            'image:image': [
                {'image:loc': image_url},
                {'image:caption': URL(image_url).name},
            ]
        }

    def image_ref(self, record):
        ''' First non-empty image field, in ``image_fields`` order. '''
        for field in self.image_fields:
            value = getattr(record, field, None)
            if value:
                return value
        return None

    def validate_image_url(self, image_url):
        return bool(image_url)


class PostNodeBuilder(NodeBuilder):
    image_fields = ('feature_image',)


class PageNodeBuilder(PostNodeBuilder):
    pass


class TagNodeBuilder(NodeBuilder):
    image_fields = ('feature_image',)


class AuthorNodeBuilder(NodeBuilder):
    # Authors have both, and the cover is the better sitemap image.
    image_fields = ('cover_image', 'profile_image')


NODE_BUILDERS = {
    'post': PostNodeBuilder,
    'page': PageNodeBuilder,
    'tag': TagNodeBuilder,
    'author': AuthorNodeBuilder,
}


def get_node_builder(kind, url_utils):
    '''
    Get the builder for a record kind. Unknown kinds use the generic builder,
    which checks every image field.

    :param str kind:
    :param sitemapgen.url_utils.UrlUtils url_utils:
    :rtype: NodeBuilder
    '''
    return NODE_BUILDERS.get(kind, NodeBuilder)(url_utils)
