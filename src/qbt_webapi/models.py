"""
Response and request shapes for the qBittorrent Web API

Response types mirror the daemon's JSON field names and are returned as the
plain dictionaries decoded from the response body. Nothing is validated or
converted on the way in.
"""

from enum import IntEnum
from typing import Dict, List, Optional, TypedDict


class FilePriority(IntEnum):
    """Per-file download priority accepted by setFilePrio"""

    IGNORED = 0
    NORMAL = 1
    HIGH = 6
    MAXIMUM = 7


# Values accepted by the `filter` parameter of /query/torrents
TORRENT_FILTERS = (
    'all', 'downloading', 'seeding', 'completed', 'paused',
    'resumed', 'active', 'inactive', 'stalled', 'errored',
)


class ServerState(TypedDict, total=False):
    alltime_dl: int
    alltime_ul: int
    average_time_queue: int
    connection_status: str
    dht_nodes: int
    dl_info_data: int
    dl_info_speed: int
    dl_rate_limit: int
    free_space_on_disk: int
    global_ratio: str
    queued_io_jobs: int
    queueing: bool
    read_cache_hits: str
    read_cache_overload: str
    refresh_interval: int
    total_buffers_size: int
    total_peer_connections: int
    total_queued_size: int
    total_wasted_session: int
    up_info_data: int
    up_info_speed: int
    up_rate_limit: int
    use_alt_speed_limits: bool
    write_cache_overload: str


class TorrentRecord(TypedDict, total=False):
    """A torrent as found in main-data and in the torrent list

    In incremental main-data responses only the changed fields are present.
    """

    hash: str
    added_on: int
    amount_left: int
    auto_tmm: bool
    category: str
    completed: int
    completion_on: int
    dl_limit: int
    dlspeed: int
    downloaded: int
    downloaded_session: int
    eta: int
    f_l_piece_prio: bool
    force_start: bool
    last_activity: int
    magnet_uri: str
    name: str
    num_complete: int
    num_incomplete: int
    num_leechs: int
    num_seeds: int
    priority: int
    progress: float
    ratio: float
    ratio_limit: float
    save_path: str
    seen_complete: int
    seq_dl: bool
    size: int
    state: str
    super_seeding: bool
    total_size: int
    tracker: str
    up_limit: int
    uploaded: int
    uploaded_session: int
    upspeed: int


class MainDataResponse(TypedDict, total=False):
    rid: int
    full_update: bool
    torrents: Dict[str, TorrentRecord]
    torrents_removed: List[str]
    categories: List[str]
    categories_removed: List[str]
    queueing: bool
    server_state: ServerState


class TorrentGeneralResponse(TypedDict, total=False):
    addition_date: int
    comment: str
    completion_date: int
    created_by: str
    creation_date: int
    dl_limit: int
    dl_speed: int
    dl_speed_avg: int
    eta: int
    last_seen: int
    nb_connections: int
    nb_connections_limit: int
    peers: int
    peers_total: int
    piece_size: int
    pieces_have: int
    pieces_num: int
    reannounce: int
    save_path: str
    seeding_time: int
    seeds: int
    seeds_total: int
    share_ratio: float
    time_elapsed: int
    total_downloaded: int
    total_downloaded_session: int
    total_size: int
    total_uploaded: int
    total_uploaded_session: int
    total_wasted: int
    up_limit: int
    up_speed: int
    up_speed_avg: int


class TorrentTracker(TypedDict):
    url: str
    status: str
    num_peers: int
    msg: str


class TorrentWebSeed(TypedDict):
    url: str


class TorrentFile(TypedDict, total=False):
    name: str
    size: int
    progress: float
    priority: int
    is_seed: bool
    piece_range: List[int]


class PeerRecord(TypedDict, total=False):
    client: str
    connection: str
    country: str
    country_code: str
    dl_speed: int
    downloaded: int
    files: str
    flags: str
    flags_desc: str
    ip: str
    port: int
    progress: float
    relevance: float
    up_speed: int
    uploaded: int


class TorrentPeerResponse(TypedDict, total=False):
    rid: int
    full_update: bool
    show_flags: bool
    peers: Dict[str, PeerRecord]
    peers_removed: List[str]


class TransferInfo(TypedDict, total=False):
    dl_info_speed: int
    dl_info_data: int
    up_info_speed: int
    up_info_data: int
    dl_rate_limit: int
    up_rate_limit: int
    dht_nodes: int
    connection_status: str


class Preferences(TypedDict, total=False):
    """Global daemon preferences

    Only a commonly used subset is declared; the daemon accepts and returns
    many more keys, which pass through untouched.
    """

    locale: str
    save_path: str
    temp_path_enabled: bool
    temp_path: str
    scan_dirs: Dict[str, int]
    export_dir: str
    mail_notification_enabled: bool
    autorun_enabled: bool
    autorun_program: str
    preallocate_all: bool
    queueing_enabled: bool
    max_active_downloads: int
    max_active_torrents: int
    max_active_uploads: int
    dont_count_slow_torrents: bool
    max_ratio_enabled: bool
    max_ratio: float
    max_ratio_act: int
    incomplete_files_ext: bool
    listen_port: int
    upnp: bool
    random_port: bool
    dl_limit: int
    up_limit: int
    max_connec: int
    max_connec_per_torrent: int
    max_uploads: int
    max_uploads_per_torrent: int
    enable_utp: bool
    limit_utp_rate: bool
    limit_tcp_overhead: bool
    alt_dl_limit: int
    alt_up_limit: int
    scheduler_enabled: bool
    schedule_from_hour: int
    schedule_from_min: int
    schedule_to_hour: int
    schedule_to_min: int
    scheduler_days: int
    dht: bool
    pex: bool
    lsd: bool
    encryption: int
    anonymous_mode: bool
    proxy_type: int
    proxy_ip: str
    proxy_port: int
    proxy_peer_connections: bool
    proxy_auth_enabled: bool
    proxy_username: str
    proxy_password: str
    ip_filter_enabled: bool
    ip_filter_path: str
    ip_filter_trackers: bool
    web_ui_domain_list: str
    web_ui_address: str
    web_ui_port: int
    web_ui_upnp: bool
    web_ui_username: str
    web_ui_password: str
    bypass_local_auth: bool
    bypass_auth_subnet_whitelist_enabled: bool
    bypass_auth_subnet_whitelist: List[str]
    use_https: bool
    dyndns_enabled: bool
    dyndns_service: int
    dyndns_username: str
    dyndns_password: str
    dyndns_domain: str


class DownloadOptions(TypedDict, total=False):
    """Options shared by link and file download submissions

    Any key left out (or set to None) falls back to DOWNLOAD_DEFAULTS in
    qbt_webapi.form.
    """

    savepath: Optional[str]
    cookie: Optional[str]
    rename: Optional[str]
    category: Optional[str]
    paused: Optional[bool]
    skip_checking: Optional[bool]
    create_subfolder: Optional[bool]
    dl_limit: Optional[int]
    up_limit: Optional[int]
    sequential_download: Optional[bool]
    first_last_piece_priority: Optional[bool]
