from datetime import datetime, timezone
from os.path import dirname
from sys import path

from lxml import etree


# Add this project to the Python path.
path.append(dirname(dirname(__file__)))

from sitemapgen.record import Record
from sitemapgen.serializer import IMAGE_NS, SITEMAP_NS


SITE_URL = 'https://site.example'


def utc(*args):
    ''' Shorthand for an aware UTC datetime. '''
    return datetime(*args, tzinfo=timezone.utc)


def make_record(id_, url=None, **kwargs):
    ''' Create a record whose URL defaults to ``/<id>/``. '''
    if url is None:
        url = '/{}/'.format(id_)
    return Record(id=id_, url=url, **kwargs)


def parse_xml(xml):
    ''' Parse a rendered document. The XML declaration requires bytes. '''
    return etree.fromstring(xml.encode('utf8'))


def url_locs(xml):
    ''' Return the ``<loc>`` of each ``<url>`` in document order. '''
    root = parse_xml(xml)
    return [el.text for el in root.iterfind('{%s}url/{%s}loc' % (SITEMAP_NS,
        SITEMAP_NS))]


def image_elements(xml):
    root = parse_xml(xml)
    return root.findall('.//{%s}image' % IMAGE_NS)
