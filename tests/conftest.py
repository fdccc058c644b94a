"""Pytest configuration and shared fixtures for qbt-webapi test suite."""

import json
import os
from unittest.mock import Mock

import pytest
import requests

from qbt_webapi.client import Client

BASE_URL = 'http://localhost:8080'
TORRENT_HASH = '8c212779b4abde7c6bc608063a0d008b7e40ce32'


@pytest.fixture(autouse=True)
def clean_environment_variables():
    """Remove qbt-webapi environment variables around each test."""
    names = ['CONFIG_DIR']
    for var in ('QBT_WEBAPI_URL', 'QBT_WEBAPI_LOG_LEVEL', 'QBT_WEBAPI_LOG_FILE', 'QBT_WEBAPI_TRACE_MODE'):
        names.extend([var, f'{var}_FILE'])

    original = {name: os.environ.pop(name) for name in names if name in os.environ}

    yield

    for name in names:
        os.environ.pop(name, None)
    os.environ.update(original)


def make_response(status=200, body=b'', url=BASE_URL, reason='OK'):
    """Build a real requests.Response with the given status and body."""
    if isinstance(body, (dict, list)):
        body = json.dumps(body).encode()
    elif isinstance(body, str):
        body = body.encode()

    response = requests.Response()
    response.status_code = status
    response._content = body
    response.url = url
    response.reason = reason
    response.encoding = 'utf-8'
    return response


@pytest.fixture
def mock_session():
    """requests.Session double answering 200 with an empty body."""
    session = Mock(spec=requests.Session)
    session.get.return_value = make_response()
    session.post.return_value = make_response()
    return session


@pytest.fixture
def client(mock_session):
    """Client bound to the mock session."""
    return Client(BASE_URL, session=mock_session)


@pytest.fixture
def sample_main_data():
    """Full main data snapshot."""
    return {
        'rid': 1,
        'full_update': True,
        'categories': ['linux'],
        'server_state': {
            'connection_status': 'connected',
            'dht_nodes': 312,
            'dl_info_speed': 1048576,
            'up_info_speed': 524288,
        },
        'torrents': {
            TORRENT_HASH: {
                'name': 'debian-12.iso',
                'category': 'linux',
                'progress': 0.5,
                'state': 'downloading',
            }
        },
    }


@pytest.fixture
def sample_peers():
    """Full torrent peers snapshot."""
    return {
        'rid': 5,
        'full_update': True,
        'show_flags': True,
        'peers': {
            '10.0.0.2:6881': {
                'client': 'qBittorrent/4.0.4',
                'ip': '10.0.0.2',
                'port': 6881,
                'progress': 1,
            }
        },
    }


@pytest.fixture
def response_factory():
    """Factory for requests.Response objects (see make_response)."""
    return make_response
