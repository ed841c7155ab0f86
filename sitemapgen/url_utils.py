'''
URL helpers used while building sitemaps: resolving asset references to URLs
and rewriting site-relative URLs in generated markup to absolute form.
'''
import logging
import re

import w3lib.url
from yarl import URL


logger = logging.getLogger(__name__)
SITE_URL_PLACEHOLDER = '__SITE_URL__'
_ALLOWED_SCHEMES = ('http', 'https')
_LOC_RE = re.compile(r'(<(?:image:)?loc>)(/(?!/)[^<]*)(</(?:image:)?loc>)')


class UrlUtils:
    ''' Resolves references against a configured site URL. '''

    def __init__(self, site_url, image_path='content/images'):
        '''
        Constructor.

        :param str site_url: The public URL of the site, optionally with a
            subdirectory, e.g. ``https://example.com/blog``.
        :param str image_path: Site-relative directory that holds uploaded
            images.
        '''
        self._base = URL(site_url.rstrip('/') + '/')
        if not self._base.is_absolute():
            raise ValueError(f'Site URL must be absolute: {site_url!r}')
        self._image_base = self._base.join(URL(image_path.strip('/') + '/'))
        self._origin = str(self._base.origin())

    def __repr__(self):
        return '<UrlUtils site_url={}>'.format(self.site_url)

    @property
    def site_url(self):
        ''' The site URL without a trailing slash. '''
        return str(self._base).rstrip('/')

    def url_for(self, kind, ref, absolute=False):
        '''
        Resolve a reference to a URL.

        :param str kind: ``image`` resolves bare names inside the image
            directory, ``page`` resolves them against the site root.
        :param str ref: The reference stored on a record.
        :param bool absolute: Return a full URL instead of a path.
        :returns: The resolved URL, or ``None`` if ``ref`` is empty or cannot
            be resolved.
        :rtype: str or None
        '''
        if kind not in ('image', 'page'):
            raise ValueError(f'Unknown URL kind: {kind!r}')
        if not ref:
            return None

        ref = str(ref).strip()
        if ref.startswith(SITE_URL_PLACEHOLDER):
            ref = self.site_url + ref[len(SITE_URL_PLACEHOLDER):]
        elif ref.startswith('//'):
            ref = '{}:{}'.format(self._base.scheme, ref)

        try:
            parsed = URL(ref)
            if parsed.is_absolute():
                if parsed.scheme not in _ALLOWED_SCHEMES:
                    logger.debug('Rejecting %s URL: %s', parsed.scheme, ref)
                    return None
                resolved = parsed
            elif parsed.scheme:
                logger.debug('Rejecting %s URL: %s', parsed.scheme, ref)
                return None
            elif ref.startswith('/'):
                resolved = self._base.join(parsed)
            elif kind == 'image':
                resolved = self._image_base.join(parsed)
            else:
                resolved = self._base.join(parsed)
        except ValueError:
            logger.warning('Cannot resolve malformed %s reference: %r', kind,
                ref)
            return None

        if not absolute:
            resolved = resolved.relative()
        return w3lib.url.safe_url_string(str(resolved))

    def make_absolute(self, text):
        '''
        Rewrite site-relative URLs in serialized markup to absolute URLs.

        Replaces the site URL placeholder everywhere and prefixes the site
        origin to ``<loc>`` and ``<image:loc>`` values that start with ``/``.

        :param str text: Serialized XML.
        :rtype: str
        '''
        text = text.replace(SITE_URL_PLACEHOLDER, self.site_url)
        return _LOC_RE.sub(
            lambda m: m.group(1) + self._origin + m.group(2) + m.group(3),
            text)
