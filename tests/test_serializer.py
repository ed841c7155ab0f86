import pytest

from . import parse_xml, utc
from sitemapgen.serializer import (
    IMAGE_NS,
    SITEMAP_NS,
    XML_DECLARATION,
    get_declarations,
    to_xml,
)


def test_default_namespace():
    xml = to_xml({'urlset': [
        {'_attr': {'xmlns': SITEMAP_NS}},
        {'url': [{'loc': 'https://example.com/'}]},
    ]})
    assert xml == ('<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">'
        '<url><loc>https://example.com/</loc></url></urlset>')


def test_prefixed_namespace():
    xml = to_xml({'urlset': [
        {'_attr': {'xmlns': SITEMAP_NS, 'xmlns:image': IMAGE_NS}},
        {'url': [
            {'loc': 'https://example.com/'},
            {'image:image': [
                {'image:loc': 'https://example.com/a.jpg'},
                {'image:caption': 'a.jpg'},
            ]},
        ]},
    ]})
    assert '<image:image><image:loc>https://example.com/a.jpg</image:loc>' \
        '<image:caption>a.jpg</image:caption></image:image>' in xml
    root = parse_xml(xml)
    assert root.nsmap == {None: SITEMAP_NS, 'image': IMAGE_NS}
    image = root.find('{%s}url/{%s}image' % (SITEMAP_NS, IMAGE_NS))
    assert image.findtext('{%s}caption' % IMAGE_NS) == 'a.jpg'


def test_children_keep_order():
    xml = to_xml({'root': [{'b': '1'}, {'a': '2'}, {'c': '3'}]})
    assert xml == '<root><b>1</b><a>2</a><c>3</c></root>'


def test_text_is_escaped():
    xml = to_xml({'loc': 'https://example.com/?a=1&b=<2>'})
    assert xml == '<loc>https://example.com/?a=1&amp;b=&lt;2&gt;</loc>'


def test_attribute_only_node():
    xml = to_xml({'root': [{'link': {'_attr': {'href': '/a', 'rel': 'x'}}}]})
    assert xml == '<root><link href="/a" rel="x"/></root>'


def test_attributes_mixed_with_children():
    xml = to_xml({'root': [{'_attr': {'id': '1'}}, {'child': 'text'}]})
    assert xml == '<root id="1"><child>text</child></root>'


def test_scalar_values():
    xml = to_xml({'root': [
        {'lastmod': utc(2024, 1, 2, 3, 4, 5)},
        {'priority': 0.5},
        {'flag': True},
        {'empty': None},
    ]})
    assert xml == ('<root><lastmod>2024-01-02T03:04:05.000Z</lastmod>'
        '<priority>0.5</priority><flag>true</flag><empty/></root>')


def test_undeclared_prefix():
    with pytest.raises(ValueError):
        to_xml({'root': [{'image:loc': 'a'}]})


def test_single_root_required():
    with pytest.raises(ValueError):
        to_xml({'a': 'x', 'b': 'y'})


def test_declarations():
    assert get_declarations() == XML_DECLARATION
    assert get_declarations('https://example.com/sitemap.xsl') == (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<?xml-stylesheet type="text/xsl" '
        'href="https://example.com/sitemap.xsl"?>')
