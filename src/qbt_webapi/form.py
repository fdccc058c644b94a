"""
Form encoding for qBittorrent commands

The daemon takes every command argument as form text. Typed option bags are
first merged with their defaults and only then converted to text, so the two
steps can be checked on their own.
"""

import json
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

HASH_SEPARATOR = '|'
URL_SEPARATOR = '\n'
CATEGORY_SEPARATOR = '\n'
CIDR_SEPARATOR = ','

# option key -> (wire field, default)
DOWNLOAD_FIELDS = {
    'savepath': ('savepath', ''),
    'cookie': ('cookie', ''),
    'rename': ('rename', ''),
    'category': ('category', ''),
    'paused': ('paused', False),
    'skip_checking': ('skip_checking', False),
    'create_subfolder': ('root_folder', True),
    'dl_limit': ('dlLimit', 0),
    'up_limit': ('upLimit', 0),
    'sequential_download': ('sequentialDownload', False),
    'first_last_piece_priority': ('firstLastPiecePrio', False),
}

DOWNLOAD_DEFAULTS = {key: default for key, (_, default) in DOWNLOAD_FIELDS.items()}

# Preferences whose list values are sent as one separated string
LIST_PREFERENCES = {
    'bypass_auth_subnet_whitelist': CIDR_SEPARATOR,
}


def join_list(values: Union[str, Iterable[str]], separator: str) -> str:
    """
    Join list-valued argument into a single form field

    A bare string is taken as a one-element list.

    Examples:
        >>> join_list(['a', 'b'], '|')
        'a|b'
        >>> join_list('abc', '|')
        'abc'
    """
    if isinstance(values, str):
        return values
    return separator.join(values)


def split_list(value: str, separator: str) -> List[str]:
    """Inverse of join_list; an empty string yields an empty list"""
    if not value:
        return []
    return value.split(separator)


def to_form_value(value: Any) -> str:
    """
    Convert a single value to its form text

    Booleans become 'true'/'false', enums their underlying value and None the
    empty string.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        return to_form_value(value.value)
    return str(value)


def encode_form(values: Mapping[str, Any]) -> Dict[str, str]:
    """Stringify every value of a field mapping"""
    return {name: to_form_value(value) for name, value in values.items()}


def merge_download_options(options: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
    """
    Merge a partial download option bag over the defaults

    Args:
        options: Partial option bag; keys set to None count as omitted

    Returns:
        Complete option bag keyed by option name

    Raises:
        ValueError: If the bag contains an unknown option
    """
    options = options or {}

    unknown = sorted(set(options) - set(DOWNLOAD_FIELDS))
    if unknown:
        raise ValueError(f"Unknown download option(s): {', '.join(unknown)}")

    merged = dict(DOWNLOAD_DEFAULTS)
    merged.update({key: value for key, value in options.items() if value is not None})
    return merged


def encode_download_options(options: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
    """Merge options with defaults and encode them under their wire names"""
    merged = merge_download_options(options)
    return encode_form({DOWNLOAD_FIELDS[key][0]: value for key, value in merged.items()})


def encode_preferences(preferences: Mapping[str, Any]) -> Dict[str, str]:
    """
    Encode a preference update for /command/setPreferences

    Unlike downloads there is no defaulting: keys that are missing or None are
    left out so the daemon keeps its current value.

    Returns:
        Form fields with the JSON document under 'json'
    """
    payload = {}
    for key, value in preferences.items():
        if value is None:
            continue
        if key in LIST_PREFERENCES and not isinstance(value, str):
            value = join_list(value, LIST_PREFERENCES[key])
        payload[key] = value

    return {'json': json.dumps(payload)}
