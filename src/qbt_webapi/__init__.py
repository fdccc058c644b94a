"""
qbt-webapi - typed client for the qBittorrent Web API
"""

from qbt_webapi.__version__ import __version__
from qbt_webapi.client import Client, DEFAULT_URL
from qbt_webapi.errors import QBittorrentError, RequestError, ConfigurationError
from qbt_webapi.models import FilePriority

__all__ = [
    '__version__',
    'Client',
    'DEFAULT_URL',
    'QBittorrentError',
    'RequestError',
    'ConfigurationError',
    'FilePriority',
]
