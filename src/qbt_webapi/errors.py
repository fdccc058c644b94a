"""
Error types for the qBittorrent Web API client

Only an HTTP 403 from the daemon is turned into a typed error. Network
failures and other HTTP statuses surface as the underlying requests
exceptions.
"""

import sys
from functools import wraps
from typing import Optional

import requests

from qbt_webapi.logging import get_logger

logger = get_logger(__name__)


class QBittorrentError(Exception):
    """Base exception for all qbt-webapi errors"""

    def __init__(self, code: str, message: str, details: Optional[dict] = None, fix: Optional[str] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        self.fix = fix
        super().__init__(self.format_error())

    def format_error(self) -> str:
        """Format error message for user display"""
        lines = [self.message]

        if self.details:
            for key, value in self.details.items():
                lines.append(f"  • {key}: {value}")

        if self.fix:
            lines.append(f"  • Fix: {self.fix}")

        return "\n".join(lines)


class RequestError(QBittorrentError):
    """The daemon refused the request (HTTP 403 Forbidden)"""

    def __init__(self, status: int, reason: str, url: str, body: Optional[str] = None):
        self.status = status
        self.reason = reason
        self.url = url
        self.body = body or ''

        details = {
            "URL": url,
            "Status": f"{status} {reason}".strip()
        }
        if body:
            details["Response"] = body[:200]

        super().__init__(
            code=f"REQ-{status}",
            message="qBittorrent refused the request",
            details=details,
            fix="Log in through the WebUI or whitelist this host in the qBittorrent WebUI settings"
        )


class ConfigurationError(QBittorrentError):
    """Configuration file error"""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            code="CFG-001",
            message="Cannot load configuration",
            details={
                "File": file_path,
                "Problem": reason
            },
            fix="Check that the configuration file has valid YAML syntax"
        )


def handle_errors(func):
    """Decorator for user-friendly error handling in CLI entry points"""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except QBittorrentError as e:
            logger.error(str(e))
            sys.exit(1)
        except requests.RequestException as e:
            logger.error("Cannot talk to qBittorrent")
            logger.error(f"  • Error: {type(e).__name__}: {str(e)}")
            logger.error("  • Fix: Check that qBittorrent is running and the WebUI URL is correct")
            sys.exit(1)
        except KeyboardInterrupt:
            logger.info("\nOperation cancelled by user")
            sys.exit(0)
        except Exception as e:
            logger.error("Unexpected error occurred")
            logger.error(f"  • Error: {type(e).__name__}: {str(e)}")
            logger.error("  • Fix: Please report this issue with the error details above")
            logger.debug("Full stack trace:", exc_info=True)
            sys.exit(1)
    return wrapper
