import argparse
import json
import logging
import sys

import trio

from . import VERSION
from .config import SitemapSettings, get_config
from .manager import SITEMAP_TYPES, SitemapEvent, SitemapManager
from .record import Record


logger = logging.getLogger(__name__)


def configure_logging(log_level, error_log):
    ''' Set default format and output stream for logging. '''
    log_format = '%(asctime)s [%(name)s] %(levelname)s: %(message)s'
    log_date_format = '%Y-%m-%d %H:%M:%S'
    log_formatter = logging.Formatter(log_format, log_date_format)
    log_level = getattr(logging, log_level.upper())
    log_handler = logging.StreamHandler(sys.stderr)
    log_handler.setFormatter(log_formatter)
    log_handler.setLevel(log_level)
    logger = logging.getLogger()
    logger.addHandler(log_handler)
    logger.setLevel(log_level)

    if error_log is not None:
        exc_handler = logging.FileHandler(error_log)
        exc_handler.setFormatter(log_formatter)
        exc_handler.setLevel(logging.ERROR)
        logger.addHandler(exc_handler)


def get_args(argv=None):
    ''' Parse command line arguments. '''
    arg_parser = argparse.ArgumentParser(description='Sitemap generator')
    arg_parser.add_argument('--version', action='version', version=VERSION)
    arg_parser.add_argument(
        '--log-level',
        default='warning',
        metavar='LEVEL',
        choices=['debug', 'info', 'warning', 'error', 'critical'],
        help='Set logging verbosity (default: warning)'
    )
    arg_parser.add_argument(
        '--records',
        required=True,
        help='A JSON array or JSON lines file of content records.'
    )
    arg_parser.add_argument(
        '--type',
        default='index',
        choices=['index', *SITEMAP_TYPES.values()],
        help='"index" or a sitemap type: pages, posts, authors, tags '
             '(default: index)'
    )
    arg_parser.add_argument(
        '--output',
        help='Write the document to this file instead of stdout.'
    )
    arg_parser.add_argument(
        '--site-url',
        help='Override the configured site URL.'
    )
    arg_parser.add_argument(
        '--error-log',
        help='Copy error logs to the specified file.'
    )
    return arg_parser.parse_args(argv)


def load_records(path):
    '''
    Read record documents from a file containing either a JSON array or one
    JSON object per line.

    :param str path:
    :rtype: list[Record]
    '''
    with open(path, encoding='utf8') as f:
        text = f.read()
    if text.lstrip().startswith('['):
        docs = json.loads(text)
    else:
        docs = [json.loads(line) for line in text.splitlines() if line.strip()]
    return [Record.from_doc(doc) for doc in docs]


async def build_sitemaps(manager, records):
    ''' Feed ``records`` to the manager through its event channel. '''
    send_channel, recv_channel = trio.open_memory_channel(0)
    async with trio.open_nursery() as nursery:
        nursery.start_soon(manager.run, recv_channel)
        async with send_channel:
            for record in records:
                await send_channel.send(
                    SitemapEvent(SitemapEvent.ADDED, record.url, record))


def main(argv=None):
    ''' Render a sitemap from a records file. '''
    args = get_args(argv)
    configure_logging(args.log_level, args.error_log)
    settings = SitemapSettings.from_config(get_config())
    if args.site_url:
        settings.site_url = args.site_url

    records = load_records(args.records)
    logger.info('Loaded %d records from %s', len(records), args.records)
    manager = SitemapManager.from_settings(settings)
    trio.run(build_sitemaps, manager, records)

    if args.type == 'index':
        xml = manager.get_index_xml()
    else:
        xml = manager.get_sitemap_xml(args.type)

    if args.output:
        with open(args.output, 'w', encoding='utf8') as f:
            f.write(xml)
        logger.info('Wrote %s sitemap to %s', args.type, args.output)
    else:
        sys.stdout.write(xml + '\n')


if __name__ == '__main__':
    main()
