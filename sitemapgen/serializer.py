'''
Render nested mapping structures into XML text.

Documents are described the same way throughout this package: an element is a
single-key dict mapping its name to its content. Content is a list of child
elements, a scalar that becomes the element text, or a dict holding only
``_attr``. A ``{'_attr': {...}}`` entry inside a child list sets attributes on
the parent, and ``xmlns``/``xmlns:prefix`` attributes become namespace
declarations, so prefixed names such as ``image:loc`` resolve to the declared
namespace.

    >>> to_xml({'urlset': [{'_attr': {'xmlns': SITEMAP_NS}},
    ...     {'url': [{'loc': 'https://example.com/'}]}]})
    '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"><url><loc>https://example.com/</loc></url></urlset>'
'''
from datetime import datetime

from lxml import etree

from .record import format_timestamp


SITEMAP_NS = 'http://www.sitemaps.org/schemas/sitemap/0.9'
IMAGE_NS = 'http://www.google.com/schemas/sitemap-image/1.1'
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
ATTR_KEY = '_attr'


def get_declarations(stylesheet_url=None):
    '''
    Return the text that precedes every generated document.

    :param str stylesheet_url: If set, an ``xml-stylesheet`` processing
        instruction pointing at this URL is included.
    :rtype: str
    '''
    declarations = XML_DECLARATION
    if stylesheet_url:
        href = stylesheet_url.replace('&', '&amp;').replace('"', '&quot;')
        declarations += f'<?xml-stylesheet type="text/xsl" href="{href}"?>'
    return declarations


def to_xml(data):
    '''
    Serialize a single-root document description.

    :param dict data: ``{root_name: content}``
    :rtype: str
    '''
    if len(data) != 1:
        raise ValueError('Document must have exactly one root element')
    (name, content), = data.items()
    attrs, children = _split_content(content)
    nsmap = {}
    for key, value in list(attrs.items()):
        if key == 'xmlns':
            nsmap[None] = value
            del attrs[key]
        elif key.startswith('xmlns:'):
            nsmap[key[len('xmlns:'):]] = value
            del attrs[key]
    root = etree.Element(_qname(name, nsmap), nsmap=nsmap or None)
    _populate(root, attrs, children, nsmap)
    return etree.tostring(root, encoding='unicode')


def _split_content(content):
    ''' Separate attributes from child elements or text. '''
    if isinstance(content, list):
        attrs = dict()
        children = list()
        for item in content:
            if isinstance(item, dict) and set(item) == {ATTR_KEY}:
                attrs.update(item[ATTR_KEY])
            else:
                children.append(item)
        return attrs, children
    if isinstance(content, dict) and set(content) == {ATTR_KEY}:
        return dict(content[ATTR_KEY]), None
    return dict(), content


def _populate(element, attrs, children, nsmap):
    for key, value in attrs.items():
        element.set(_qname(key, nsmap, attribute=True), str(value))
    if children is None:
        return
    if not isinstance(children, list):
        element.text = _text(children)
        return
    for child in children:
        (name, content), = child.items()
        sub = etree.SubElement(element, _qname(name, nsmap))
        child_attrs, grandchildren = _split_content(content)
        _populate(sub, child_attrs, grandchildren, nsmap)


def _qname(name, nsmap, attribute=False):
    ''' Expand ``prefix:local`` to Clark notation using declared
    namespaces. Unprefixed element names use the default namespace;
    unprefixed attributes stay unqualified. '''
    prefix, sep, local = name.partition(':')
    if sep:
        try:
            return '{%s}%s' % (nsmap[prefix], local)
        except KeyError:
            raise ValueError(f'Undeclared namespace prefix in {name!r}')
    if not attribute and None in nsmap:
        return '{%s}%s' % (nsmap[None], name)
    return name


def _text(value):
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)
