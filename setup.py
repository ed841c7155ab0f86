'''
As an application, this package isn't intended to be published to PyPI. This
setup.py exists so that we can easily add sitemapgen to the Python path.
'''
from setuptools import setup, find_packages
from pathlib import Path

here = Path(__file__).parent

# Get version
version = {}
with (here / "sitemapgen" / "version.py").open() as f:
    exec(f.read(), version)

setup(
    name='sitemapgen',
    version=version['__version__'],
    description='Incrementally maintained XML sitemaps for content sites',
    python_requires=">=3.8",
    keywords='sitemap xml seo',
    packages=find_packages(exclude=['docs', 'tests']),
    install_requires=[
        'lxml',
        'python-dateutil',
        'trio',
        'w3lib',
        'yarl',
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-trio',
        ],
    },
    entry_points={
        'console_scripts': [
            'sitemapgen=sitemapgen.__main__:main',
        ],
    },
)
