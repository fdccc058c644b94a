#!/usr/bin/env python3
"""
qbt-webapi CLI - query and control a qBittorrent daemon from the shell

Query commands print the daemon's JSON response on stdout. Commands that
change daemon state print nothing; qBittorrent does not confirm them.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from qbt_webapi.__version__ import __version__, __description__
from qbt_webapi.client import Client
from qbt_webapi.config import load_config
from qbt_webapi.errors import handle_errors
from qbt_webapi.logging import setup_logging, get_logger
from qbt_webapi.models import TORRENT_FILTERS

logger = get_logger(__name__)


def add_download_arguments(parser: argparse.ArgumentParser):
    """Options shared by the download and upload commands"""
    parser.add_argument('--savepath', help='Download folder (default: daemon setting)')
    parser.add_argument('--category', help='Category to assign')
    parser.add_argument('--rename', help='New torrent name')
    parser.add_argument('--cookie', help='Cookie sent to fetch .torrent URLs')
    parser.add_argument('--paused', action='store_true', default=None, help='Add torrents paused')
    parser.add_argument('--skip-checking', action='store_true', default=None, help='Skip hash checking')
    parser.add_argument('--no-subfolder', dest='create_subfolder', action='store_false', default=None,
                        help='Do not create a root folder for multi-file torrents')
    parser.add_argument('--dl-limit', type=int, help='Download limit in bytes/s')
    parser.add_argument('--up-limit', type=int, help='Upload limit in bytes/s')
    parser.add_argument('--sequential', dest='sequential_download', action='store_true', default=None,
                        help='Download pieces in order')
    parser.add_argument('--first-last-piece', dest='first_last_piece_priority', action='store_true',
                        default=None, help='Prioritize first and last pieces')


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for qbt-webapi"""
    parser = argparse.ArgumentParser(
        prog='qbt-webapi',
        description=__description__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Examples:
  # Full main data snapshot
  qbt-webapi --url http://nas:8080 maindata

  # Torrents currently downloading, newest first
  qbt-webapi torrents --filter downloading --sort added_on --reverse

  # Add a magnet link paused into a category
  qbt-webapi download "magnet:?xt=urn:btih:..." --category linux --paused
        '''
    )

    parser.add_argument('--url', help='qBittorrent WebUI URL (default: from config or http://localhost:8080)')
    parser.add_argument('--config-dir', type=Path, default=None,
                        help='Path to configuration directory (default: CONFIG_DIR env var or ./config)')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Set logging verbosity (default: from config or INFO)')
    parser.add_argument('--trace', action='store_true', default=None,
                        help='Enable trace mode with detailed logging (module/function/line)')
    parser.add_argument('--version', action='version', version=f'qbt-webapi v{__version__}')

    commands = parser.add_subparsers(dest='command', metavar='COMMAND')
    commands.required = True

    sync = commands.add_parser('maindata', help='Show main data (torrents and server state)')
    sync.add_argument('--rid', type=int, help='Sync token from a previous response')

    torrents = commands.add_parser('torrents', help='List torrents')
    torrents.add_argument('--filter', choices=TORRENT_FILTERS, help='State filter')
    torrents.add_argument('--category', help='Only torrents in this category')
    torrents.add_argument('--sort', help='Field to sort by')
    torrents.add_argument('--reverse', action='store_true', default=None, help='Reverse sort order')
    torrents.add_argument('--limit', type=int, help='Maximum number of torrents')
    torrents.add_argument('--offset', type=int, help='Number of torrents to skip')

    for name, help_text in (
        ('properties', 'Show general properties of a torrent'),
        ('trackers', 'Show trackers of a torrent'),
        ('files', 'Show files of a torrent'),
        ('peers', 'Show peers of a torrent'),
    ):
        command = commands.add_parser(name, help=help_text)
        command.add_argument('torrent_hash', help='Torrent hash')

    commands.add_parser('transfer', help='Show global transfer information')
    commands.add_parser('preferences', help='Show global preferences')
    commands.add_parser('version', help='Show qBittorrent and Web API versions')

    for name, help_text in (
        ('pause', 'Pause torrents'),
        ('resume', 'Resume torrents'),
    ):
        command = commands.add_parser(name, help=help_text)
        target = command.add_mutually_exclusive_group(required=True)
        target.add_argument('torrent_hash', nargs='?', help='Torrent hash')
        target.add_argument('--all', action='store_true', help='Apply to all torrents')

    recheck = commands.add_parser('recheck', help='Recheck a torrent')
    recheck.add_argument('torrent_hash', help='Torrent hash')

    delete = commands.add_parser('delete', help='Delete torrents')
    delete.add_argument('hashes', nargs='+', help='Torrent hashes')
    delete.add_argument('--delete-files', action='store_true', help='Also delete downloaded data')

    download = commands.add_parser('download', help='Add torrents from magnet links or URLs')
    download.add_argument('urls', nargs='+', help='Magnet links or torrent URLs')
    add_download_arguments(download)

    upload = commands.add_parser('upload', help='Add a torrent from a local .torrent file')
    upload.add_argument('file', type=Path, help='Path to .torrent file')
    add_download_arguments(upload)

    return parser


def download_options(args) -> dict:
    """Collect download options given on the command line"""
    keys = (
        'savepath', 'cookie', 'rename', 'category', 'paused', 'skip_checking',
        'create_subfolder', 'dl_limit', 'up_limit', 'sequential_download',
        'first_last_piece_priority',
    )
    return {key: getattr(args, key) for key in keys if getattr(args, key, None) is not None}


def print_json(data):
    print(json.dumps(data, indent=2))


def run_command(client: Client, args):
    """Dispatch a parsed command to the client"""
    command = args.command

    if command == 'maindata':
        print_json(client.main_data(rid=args.rid))
    elif command == 'torrents':
        print_json(client.torrents(
            filter=args.filter,
            category=args.category,
            sort=args.sort,
            reverse=args.reverse,
            limit=args.limit,
            offset=args.offset
        ))
    elif command == 'properties':
        print_json(client.torrent_general(args.torrent_hash))
    elif command == 'trackers':
        print_json(client.torrent_trackers(args.torrent_hash))
    elif command == 'files':
        print_json(client.torrent_files(args.torrent_hash))
    elif command == 'peers':
        print_json(client.torrent_peers(args.torrent_hash))
    elif command == 'transfer':
        print_json(client.transfer_info())
    elif command == 'preferences':
        print_json(client.preferences())
    elif command == 'version':
        print_json({
            'qbittorrent': client.qbittorrent_version(),
            'api': client.api_version(),
            'api_min': client.api_min_version()
        })
    elif command == 'pause':
        if args.all:
            client.pause_all()
        else:
            client.pause(args.torrent_hash)
    elif command == 'resume':
        if args.all:
            client.resume_all()
        else:
            client.resume(args.torrent_hash)
    elif command == 'recheck':
        client.recheck(args.torrent_hash)
    elif command == 'delete':
        client.delete(args.hashes, delete_files=args.delete_files)
    elif command == 'download':
        client.download_links(args.urls, download_options(args))
    elif command == 'upload':
        client.download_file(args.file, download_options(args))


@handle_errors
def main(argv: Optional[List[str]] = None):
    """Main entry point for qbt-webapi CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config_dir, overrides={
        'qbittorrent.url': args.url,
        'logging.level': args.log_level,
        'logging.trace_mode': args.trace,
    })

    setup_logging(config, config.get_trace_mode())

    client = Client(config.get_url())
    logger.debug(f"Using qBittorrent at {client.url}")

    run_command(client, args)

    sys.exit(0)


if __name__ == '__main__':
    main()
