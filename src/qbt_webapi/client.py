"""
qBittorrent Web API client

One method per daemon endpoint. Commands are fire and forget: the daemon
never reports whether it accepted a command, so a command returning without
an exception only means the request was delivered.
"""

import os
import threading
from typing import Iterable, List, Optional, Union

import requests

from qbt_webapi import form
from qbt_webapi.logging import get_logger
from qbt_webapi.models import (
    DownloadOptions,
    FilePriority,
    MainDataResponse,
    Preferences,
    TorrentFile,
    TorrentGeneralResponse,
    TorrentPeerResponse,
    TorrentRecord,
    TorrentTracker,
    TorrentWebSeed,
    TransferInfo,
)
from qbt_webapi.transport import fetch_json, fetch_text, multipart_body, submit_form

logger = get_logger(__name__)

DEFAULT_URL = 'http://localhost:8080'

Hashes = Union[str, Iterable[str]]


class Client:
    """
    qBittorrent Web API client

    Holds the base URL, the HTTP session and the last sync token (rid) seen
    from /sync/maindata or /sync/torrent_peers.
    """

    def __init__(self, url: str = DEFAULT_URL, session: Optional[requests.Session] = None):
        """
        Args:
            url: qBittorrent WebUI URL (e.g., 'http://localhost:8080')
            session: HTTP session to use; a new one is created if omitted.
                     Timeouts, cookies and auth headers are configured there.
        """
        self.url = url.rstrip('/')
        self.session = session or requests.Session()
        self.rid: Optional[int] = None
        self._sync_lock = threading.Lock()

    def _endpoint(self, path: str) -> str:
        return f"{self.url}/{path}"

    # Sync Methods

    def _sync(self, path: str, params: dict, rid: Optional[int]):
        with self._sync_lock:
            token = rid if rid is not None else self.rid
            if token is not None:
                params['rid'] = token

            response = fetch_json(self.session, self._endpoint(path), params)

            if response is not None and 'rid' in response:
                self.rid = response['rid']
                logger.debug(f"Sync token now {self.rid}")
            return response

    def main_data(self, rid: Optional[int] = None) -> Optional[MainDataResponse]:
        """
        Fetch torrent list and server state changes since the last sync

        Args:
            rid: Sync token to send instead of the stored one

        Returns:
            Main data (a full snapshot when full_update is set, a delta
            otherwise), or None if the daemon returned nothing
        """
        return self._sync('sync/maindata', {}, rid)

    def torrent_peers(self, torrent_hash: str, rid: Optional[int] = None) -> Optional[TorrentPeerResponse]:
        """
        Fetch peer changes of a torrent since the last sync

        Shares the stored sync token with main_data().

        Args:
            torrent_hash: Torrent hash
            rid: Sync token to send instead of the stored one

        Returns:
            Peer data keyed by 'ip:port', or None if the daemon returned nothing
        """
        return self._sync('sync/torrent_peers', {'hash': torrent_hash}, rid)

    # Torrent Information Methods

    def torrents(self, filter: Optional[str] = None, category: Optional[str] = None,
                 sort: Optional[str] = None, reverse: Optional[bool] = None,
                 limit: Optional[int] = None, offset: Optional[int] = None) -> Optional[List[TorrentRecord]]:
        """
        Get list of torrents

        Args:
            filter: State filter (see models.TORRENT_FILTERS)
            category: Only torrents in this category
            sort: Field to sort by (e.g., 'name', 'added_on')
            reverse: Reverse the sort order
            limit: Maximum number of torrents
            offset: Skip this many torrents (negative counts from the end)

        Returns:
            List of torrent dictionaries, or None if the daemon returned nothing
        """
        params = {
            'filter': filter,
            'category': category,
            'sort': sort,
            'reverse': reverse,
            'limit': limit,
            'offset': offset,
        }
        params = form.encode_form({k: v for k, v in params.items() if v is not None})
        return fetch_json(self.session, self._endpoint('query/torrents'), params)

    def torrent_general(self, torrent_hash: str) -> Optional[TorrentGeneralResponse]:
        """Get general properties of a torrent"""
        return fetch_json(self.session, self._endpoint(f'query/propertiesGeneral/{torrent_hash}'))

    def torrent_trackers(self, torrent_hash: str) -> Optional[List[TorrentTracker]]:
        """Get trackers of a torrent"""
        return fetch_json(self.session, self._endpoint(f'query/propertiesTrackers/{torrent_hash}'))

    def torrent_web_seeds(self, torrent_hash: str) -> Optional[List[TorrentWebSeed]]:
        """Get web seeds of a torrent"""
        return fetch_json(self.session, self._endpoint(f'query/propertiesWebSeeds/{torrent_hash}'))

    def torrent_files(self, torrent_hash: str) -> Optional[List[TorrentFile]]:
        """Get file list of a torrent"""
        return fetch_json(self.session, self._endpoint(f'query/propertiesFiles/{torrent_hash}'))

    def piece_states(self, torrent_hash: str) -> Optional[List[int]]:
        """Get piece states (0 = not downloaded, 1 = downloading, 2 = downloaded)"""
        return fetch_json(self.session, self._endpoint(f'query/getPieceStates/{torrent_hash}'))

    def piece_hashes(self, torrent_hash: str) -> Optional[List[str]]:
        """Get piece hashes of a torrent"""
        return fetch_json(self.session, self._endpoint(f'query/getPieceHashes/{torrent_hash}'))

    # Global Information Methods

    def transfer_info(self) -> Optional[TransferInfo]:
        """Get global transfer information"""
        return fetch_json(self.session, self._endpoint('query/transferInfo'))

    def preferences(self) -> Optional[Preferences]:
        """Get global preferences"""
        return fetch_json(self.session, self._endpoint('query/preferences'))

    def api_version(self) -> int:
        """Get Web API version"""
        return int(fetch_text(self.session, self._endpoint('version/api')))

    def api_min_version(self) -> int:
        """Get oldest Web API version the daemon is compatible with"""
        return int(fetch_text(self.session, self._endpoint('version/api_min')))

    def qbittorrent_version(self) -> str:
        """Get qBittorrent version string (e.g., 'v4.0.4')"""
        return fetch_text(self.session, self._endpoint('version/qbittorrent')).strip()

    def global_download_limit(self) -> int:
        """Get global download limit in bytes/s (0 = unlimited)"""
        return int(fetch_text(self.session, self._endpoint('command/getGlobalDlLimit')))

    def global_upload_limit(self) -> int:
        """Get global upload limit in bytes/s (0 = unlimited)"""
        return int(fetch_text(self.session, self._endpoint('command/getGlobalUpLimit')))

    def alternative_speed_limits_enabled(self) -> bool:
        """Check whether alternative speed limits are active"""
        return fetch_text(self.session, self._endpoint('command/alternativeSpeedLimitsEnabled')).strip() == '1'

    # Torrent Control Methods

    def _command(self, path: str, fields: Optional[dict] = None):
        submit_form(self.session, self._endpoint(f'command/{path}'), form.encode_form(fields or {}))

    def pause(self, torrent_hash: str):
        """Pause a torrent"""
        self._command('pause', {'hash': torrent_hash})

    def pause_all(self):
        """Pause all torrents"""
        self._command('pauseAll')

    def resume(self, torrent_hash: str):
        """Resume a torrent"""
        self._command('resume', {'hash': torrent_hash})

    def resume_all(self):
        """Resume all torrents"""
        self._command('resumeAll')

    def recheck(self, torrent_hash: str):
        """Recheck a torrent"""
        self._command('recheck', {'hash': torrent_hash})

    def delete(self, hashes: Hashes, delete_files: bool = False):
        """
        Delete torrents

        Args:
            hashes: Torrent hash or list of hashes
            delete_files: Also delete downloaded data
        """
        path = 'deletePerm' if delete_files else 'delete'
        self._command(path, {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def set_file_priority(self, torrent_hash: str, file_id: int, priority: FilePriority):
        """
        Set download priority of a file

        Args:
            torrent_hash: Torrent hash
            file_id: Index of the file in torrent_files()
            priority: FilePriority value
        """
        self._command('setFilePrio', {
            'hash': torrent_hash,
            'id': file_id,
            'priority': FilePriority(priority),
        })

    def increase_priority(self, hashes: Hashes):
        """Move torrents up the queue"""
        self._command('increasePrio', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def decrease_priority(self, hashes: Hashes):
        """Move torrents down the queue"""
        self._command('decreasePrio', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def top_priority(self, hashes: Hashes):
        """Move torrents to the top of the queue"""
        self._command('topPrio', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def bottom_priority(self, hashes: Hashes):
        """Move torrents to the bottom of the queue"""
        self._command('bottomPrio', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def set_super_seeding(self, hashes: Hashes, value: bool):
        """Enable or disable super seeding"""
        self._command('setSuperSeeding', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'value': value,
        })

    def set_force_start(self, hashes: Hashes, value: bool):
        """Enable or disable force start"""
        self._command('setForceStart', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'value': value,
        })

    def toggle_sequential_download(self, hashes: Hashes):
        """Toggle sequential download"""
        self._command('toggleSequentialDownload', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def toggle_first_last_piece_priority(self, hashes: Hashes):
        """Toggle first/last piece priority"""
        self._command('toggleFirstLastPiecePrio', {'hashes': form.join_list(hashes, form.HASH_SEPARATOR)})

    def set_location(self, hashes: Hashes, location: str):
        """Move torrent data to another directory"""
        self._command('setLocation', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'location': location,
        })

    def rename(self, torrent_hash: str, name: str):
        """Rename a torrent"""
        self._command('rename', {'hash': torrent_hash, 'name': name})

    def add_trackers(self, torrent_hash: str, urls: Iterable[str]):
        """Add trackers to a torrent"""
        self._command('addTrackers', {
            'hash': torrent_hash,
            'urls': form.join_list(urls, form.URL_SEPARATOR),
        })

    # Category Methods

    def set_category(self, hashes: Hashes, category: str):
        """Set category of torrents (empty string removes it)"""
        self._command('setCategory', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'category': category,
        })

    def add_category(self, category: str):
        """Create a category"""
        self._command('addCategory', {'category': category})

    def remove_categories(self, categories: Iterable[str]):
        """Delete categories"""
        self._command('removeCategories', {
            'categories': form.join_list(categories, form.CATEGORY_SEPARATOR),
        })

    # Limit Methods

    def set_torrents_download_limit(self, hashes: Hashes, limit: int):
        """Set per-torrent download limit (bytes/s)"""
        self._command('setTorrentsDlLimit', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'limit': limit,
        })

    def set_torrents_upload_limit(self, hashes: Hashes, limit: int):
        """Set per-torrent upload limit (bytes/s)"""
        self._command('setTorrentsUpLimit', {
            'hashes': form.join_list(hashes, form.HASH_SEPARATOR),
            'limit': limit,
        })

    def set_global_download_limit(self, limit: int):
        """Set global download limit (bytes/s, 0 = unlimited)"""
        self._command('setGlobalDlLimit', {'limit': limit})

    def set_global_upload_limit(self, limit: int):
        """Set global upload limit (bytes/s, 0 = unlimited)"""
        self._command('setGlobalUpLimit', {'limit': limit})

    def toggle_alternative_speed_limits(self):
        """Switch alternative speed limits on or off"""
        self._command('toggleAlternativeSpeedLimits')

    # Application Methods

    def set_preferences(self, preferences: Preferences):
        """
        Change global preferences

        Only the given keys are sent; everything else keeps its current value.
        """
        submit_form(self.session, self._endpoint('command/setPreferences'), form.encode_preferences(preferences))

    def shutdown(self):
        """Shut down the daemon"""
        self._command('shutdown')

    # Download Methods

    def download_links(self, urls: Iterable[str], options: Optional[DownloadOptions] = None):
        """
        Add torrents from magnet links or torrent URLs

        Args:
            urls: Magnet links and/or http(s) URLs
            options: Download options; omitted options use DOWNLOAD_DEFAULTS
        """
        urls = [urls] if isinstance(urls, str) else list(urls)
        fields = {'urls': form.join_list(urls, form.URL_SEPARATOR)}
        fields.update(form.encode_download_options(options))

        logger.info(f"Submitting {len(urls)} link(s) to {self.url}")
        submit_form(self.session, self._endpoint('command/download'), fields)

    def download_file(self, path: Union[str, os.PathLike], options: Optional[DownloadOptions] = None):
        """
        Upload a local .torrent file

        The file is streamed from disk. Content-Length is the exact size of
        the multipart body, which includes the file size.

        Args:
            path: Path to the .torrent file
            options: Download options; omitted options use DOWNLOAD_DEFAULTS

        Raises:
            OSError: If the file cannot be read
        """
        fields = form.encode_download_options(options)

        with open(path, 'rb') as torrent_file:
            size = os.fstat(torrent_file.fileno()).st_size
            logger.info(f"Uploading {os.path.basename(path)} ({size} bytes) to {self.url}")

            fields['torrents'] = (os.path.basename(path), torrent_file, 'application/x-bittorrent')
            body = multipart_body(fields)
            headers = {
                'Content-Type': body.content_type,
                'Content-Length': str(body.len),
            }
            submit_form(self.session, self._endpoint('command/upload'), body, headers=headers)
