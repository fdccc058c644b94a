"""Version information for qbt-webapi"""

__version__ = '0.1.0'
__description__ = 'Typed client for the qBittorrent Web API'
