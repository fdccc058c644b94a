"""Tests for form encoding."""

import json

import pytest

from qbt_webapi.form import (
    CATEGORY_SEPARATOR,
    CIDR_SEPARATOR,
    DOWNLOAD_DEFAULTS,
    HASH_SEPARATOR,
    URL_SEPARATOR,
    encode_download_options,
    encode_form,
    encode_preferences,
    join_list,
    merge_download_options,
    split_list,
    to_form_value,
)
from qbt_webapi.models import FilePriority


class TestJoinSplit:
    """Test list joining with daemon separators."""

    def test_join_hashes(self):
        assert join_list(['a', 'b'], HASH_SEPARATOR) == 'a|b'

    def test_join_urls(self):
        assert join_list(['magnet:?xt=1', 'http://x/a.torrent'], URL_SEPARATOR) == 'magnet:?xt=1\nhttp://x/a.torrent'

    def test_join_single_string(self):
        """A bare string is one element, not a sequence of characters"""
        assert join_list('abc', HASH_SEPARATOR) == 'abc'

    def test_join_generator(self):
        assert join_list((c for c in ['x', 'y']), CIDR_SEPARATOR) == 'x,y'

    @pytest.mark.parametrize('separator', [HASH_SEPARATOR, URL_SEPARATOR, CATEGORY_SEPARATOR, CIDR_SEPARATOR])
    def test_round_trip(self, separator):
        values = ['10.0.0.0/8', '192.168.1.0/24', 'linux']
        assert split_list(join_list(values, separator), separator) == values

    def test_split_empty(self):
        assert split_list('', HASH_SEPARATOR) == []


class TestToFormValue:
    """Test value stringification."""

    def test_booleans(self):
        assert to_form_value(True) == 'true'
        assert to_form_value(False) == 'false'

    def test_numbers(self):
        assert to_form_value(0) == '0'
        assert to_form_value(1048576) == '1048576'
        assert to_form_value(1.5) == '1.5'

    def test_enum_sent_as_number_text(self):
        assert to_form_value(FilePriority.MAXIMUM) == '7'
        assert to_form_value(FilePriority.IGNORED) == '0'

    def test_none(self):
        assert to_form_value(None) == ''

    def test_encode_form(self):
        assert encode_form({'hash': 'abc', 'value': True, 'limit': 10}) == {
            'hash': 'abc',
            'value': 'true',
            'limit': '10',
        }


class TestDownloadOptions:
    """Test merge-then-stringify of download options."""

    def test_merge_empty_gives_defaults(self):
        assert merge_download_options() == DOWNLOAD_DEFAULTS
        assert merge_download_options({}) == DOWNLOAD_DEFAULTS

    def test_merge_keeps_given_values(self):
        merged = merge_download_options({'savepath': '/data', 'paused': True})

        assert merged['savepath'] == '/data'
        assert merged['paused'] is True
        assert merged['dl_limit'] == 0

    def test_merge_none_counts_as_omitted(self):
        merged = merge_download_options({'category': None})
        assert merged['category'] == ''

    def test_merge_does_not_mutate_defaults(self):
        merge_download_options({'paused': True})
        assert DOWNLOAD_DEFAULTS['paused'] is False

    def test_merge_rejects_unknown_option(self):
        with pytest.raises(ValueError, match='dlLimit'):
            merge_download_options({'dlLimit': 100})

    def test_encode_only_savepath_matches_default_table(self):
        assert encode_download_options({'savepath': '/downloads'}) == {
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

    def test_encode_uses_wire_names(self):
        encoded = encode_download_options({
            'create_subfolder': False,
            'first_last_piece_priority': True,
            'up_limit': 2048,
        })

        assert encoded['root_folder'] == 'false'
        assert encoded['firstLastPiecePrio'] == 'true'
        assert encoded['upLimit'] == '2048'
        assert 'create_subfolder' not in encoded


class TestPreferences:
    """Test preference update encoding."""

    def test_only_given_keys_sent(self):
        fields = encode_preferences({'dl_limit': 1024})

        assert list(fields) == ['json']
        assert json.loads(fields['json']) == {'dl_limit': 1024}

    def test_none_values_left_out(self):
        payload = json.loads(encode_preferences({'save_path': '/data', 'up_limit': None})['json'])

        assert payload == {'save_path': '/data'}
        assert 'up_limit' not in payload

    def test_no_defaults_applied(self):
        assert json.loads(encode_preferences({})['json']) == {}

    def test_cidr_list_joined_with_comma(self):
        payload = json.loads(encode_preferences({
            'bypass_auth_subnet_whitelist': ['10.0.0.0/8', '192.168.0.0/16'],
        })['json'])

        assert payload['bypass_auth_subnet_whitelist'] == '10.0.0.0/8,192.168.0.0/16'

    def test_booleans_stay_json_booleans(self):
        payload = json.loads(encode_preferences({'dht': False})['json'])
        assert payload['dht'] is False
