import configparser
from dataclasses import dataclass
import pathlib


_root = pathlib.Path(__file__).resolve().parent.parent


def get_path(relpath):
    ''' Get absolute path to a project-relative path. '''
    return _root / relpath


def get_config():
    '''
    Read the application configuration from the standard configuration files.

    :rtype: ConfigParser
    '''
    config_dir = get_path("conf")
    config_files = [
        config_dir / "system.ini",
        config_dir / "local.ini",
    ]
    config = configparser.ConfigParser()
    config.optionxform = str
    config.read(config_files)
    return config


@dataclass
class SitemapSettings:
    ''' Typed view of the ``[site]`` and ``[sitemap]`` configuration
    sections. '''
    site_url: str = 'http://localhost:2368'
    image_path: str = 'content/images'
    max_nodes: int = 50_000
    keep_most_recent: bool = False
    stylesheet: str = ''

    @classmethod
    def from_config(cls, config):
        '''
        Create settings from a parsed configuration. Missing sections or
        options fall back to the defaults.

        :param configparser.ConfigParser config:
        :rtype: SitemapSettings
        '''
        defaults = cls()
        site = config['site'] if config.has_section('site') else {}
        sitemap = config['sitemap'] if config.has_section('sitemap') else {}
        return cls(
            site_url=site.get('url') or defaults.site_url,
            image_path=site.get('image_path') or defaults.image_path,
            max_nodes=int(sitemap.get('max_nodes') or defaults.max_nodes),
            keep_most_recent=_parse_bool(sitemap.get('keep_most_recent'),
                defaults.keep_most_recent),
            stylesheet=sitemap.get('stylesheet', defaults.stylesheet),
        )


def _parse_bool(value, default):
    ''' Parse an INI boolean, returning ``default`` for empty values. '''
    if value is None or value.strip() == '':
        return default
    lowered = value.strip().lower()
    if lowered not in configparser.ConfigParser.BOOLEAN_STATES:
        raise ValueError(f'Not a boolean: {value!r}')
    return configparser.ConfigParser.BOOLEAN_STATES[lowered]
