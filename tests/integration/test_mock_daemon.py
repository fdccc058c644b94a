"""
End-to-end tests against a stand-in qBittorrent daemon

A small Flask app emulates the legacy WebUI endpoints and records what it
receives. It is served by werkzeug on an ephemeral port so the client goes
through real HTTP and real multipart encoding.
"""

import threading

import pytest
from flask import Flask, abort, jsonify, request
from werkzeug.serving import make_server

from qbt_webapi.client import Client
from qbt_webapi.errors import RequestError
from qbt_webapi.models import FilePriority

HASH = '8c212779b4abde7c6bc608063a0d008b7e40ce32'


def create_daemon_app():
    """Create Flask app emulating the qBittorrent WebUI."""
    app = Flask(__name__)
    app.received = []
    app.state = {'rid': 0}

    def record(kind):
        app.received.append({
            'path': request.path,
            'kind': kind,
            'args': request.args.to_dict(),
            'form': request.form.to_dict(),
            'files': {name: (f.filename, f.read()) for name, f in request.files.items()},
        })

    @app.route('/sync/maindata')
    def maindata():
        record('sync')
        sent_rid = request.args.get('rid')
        app.state['rid'] += 1
        return jsonify({
            'rid': app.state['rid'],
            'full_update': sent_rid is None,
            'torrents': {HASH: {'name': 'debian-12.iso', 'progress': 0.25 * app.state['rid']}},
            'server_state': {'connection_status': 'connected'},
        })

    @app.route('/sync/torrent_peers')
    def torrent_peers():
        record('sync')
        return ''

    @app.route('/query/torrents')
    def torrents():
        record('query')
        return jsonify([{'hash': HASH, 'name': 'debian-12.iso', 'state': request.args.get('filter', 'all')}])

    @app.route('/query/preferences')
    def preferences():
        record('query')
        abort(403)

    @app.route('/version/api')
    def api_version():
        return '17'

    @app.route('/version/qbittorrent')
    def qbittorrent_version():
        return 'v4.0.4'

    @app.route('/command/<name>', methods=['POST'])
    def command(name):
        record('command')
        return ''

    return app


@pytest.fixture
def daemon():
    """Run the stand-in daemon in a background thread."""
    app = create_daemon_app()
    server = make_server('127.0.0.1', 0, app, threaded=True)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()

    app.base_url = f'http://127.0.0.1:{server.server_port}'
    yield app

    server.shutdown()
    thread.join(timeout=5)


@pytest.fixture
def client(daemon):
    return Client(daemon.base_url)


class TestSyncEndToEnd:
    """Incremental main data over real HTTP."""

    def test_rid_flows_from_response_to_next_request(self, client, daemon):
        first = client.main_data()

        assert daemon.received[0]['args'] == {}
        assert first['full_update'] is True
        assert client.rid == 1

        second = client.main_data()

        assert daemon.received[1]['args'] == {'rid': '1'}
        assert second['full_update'] is False
        assert client.rid == 2

    def test_empty_peer_response_is_absent(self, client, daemon):
        client.main_data()

        assert client.torrent_peers(HASH) is None
        assert client.rid == 1
        assert daemon.received[-1]['args'] == {'hash': HASH, 'rid': '1'}


class TestQueriesEndToEnd:
    """Simple GETs over real HTTP."""

    def test_torrents_filter(self, client, daemon):
        torrents = client.torrents(filter='downloading')

        assert torrents == [{'hash': HASH, 'name': 'debian-12.iso', 'state': 'downloading'}]

    def test_versions(self, client):
        assert client.api_version() == 17
        assert client.qbittorrent_version() == 'v4.0.4'

    def test_forbidden(self, client):
        with pytest.raises(RequestError) as exc_info:
            client.preferences()

        assert exc_info.value.status == 403


class TestCommandsEndToEnd:
    """Multipart commands over real HTTP."""

    def test_download_links_default_form(self, client, daemon):
        client.download_links(['magnet:?xt=urn:btih:abc'], {'savepath': '/downloads'})

        received = daemon.received[-1]
        assert received['path'] == '/command/download'
        assert received['form'] == {
            'urls': 'magnet:?xt=urn:btih:abc',
            'savepath': '/downloads',
            'cookie': '',
            'rename': '',
            'category': '',
            'paused': 'false',
            'skip_checking': 'false',
            'root_folder': 'true',
            'dlLimit': '0',
            'upLimit': '0',
            'sequentialDownload': 'false',
            'firstLastPiecePrio': 'false',
        }

    def test_download_file(self, client, daemon, tmp_path):
        torrent = tmp_path / 'debian-12.torrent'
        torrent.write_bytes(b'd8:announce3:urle')

        client.download_file(torrent, {'paused': True})

        received = daemon.received[-1]
        assert received['path'] == '/command/upload'
        assert received['files'] == {'torrents': ('debian-12.torrent', b'd8:announce3:urle')}
        assert received['form']['paused'] == 'true'

    def test_delete_and_priority(self, client, daemon):
        client.delete([HASH, 'other'], delete_files=True)
        client.set_file_priority(HASH, 1, FilePriority.IGNORED)

        delete, priority = daemon.received[-2:]
        assert delete['path'] == '/command/deletePerm'
        assert delete['form'] == {'hashes': f'{HASH}|other'}
        assert priority['form'] == {'hash': HASH, 'id': '1', 'priority': '0'}

    def test_set_preferences_only_given_keys(self, client, daemon):
        client.set_preferences({'dl_limit': 2048})

        received = daemon.received[-1]
        assert received['path'] == '/command/setPreferences'
        assert received['form'] == {'json': '{"dl_limit": 2048}'}

    def test_pause_all_without_fields(self, client, daemon):
        client.pause_all()

        assert daemon.received[-1]['path'] == '/command/pauseAll'
        assert daemon.received[-1]['form'] == {}
