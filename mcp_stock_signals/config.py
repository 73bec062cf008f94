"""
Configuration from environment variables

- PORT: HTTP server port (default: 5002)
- HOST: HTTP server bind address (default: 127.0.0.1)
- USER_AGENT: SEC EDGAR identity (name + email)
- GUIDANCE_FILING_LIMIT: Recent filings scanned per guidance request (default: 5)
"""
import os

DEFAULT_PORT = 5002
DEFAULT_HOST = "127.0.0.1"
DEFAULT_USER_AGENT = "stock-signals research research@example.com"
DEFAULT_GUIDANCE_FILING_LIMIT = 5


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, str(default))
    try:
        return int(raw)
    except ValueError:
        msg = f"Invalid {name} value: {raw}"
        raise ValueError(msg) from None


def get_port() -> int:
    """Get server port from environment or use default"""
    return _int_env("PORT", DEFAULT_PORT)


def get_host() -> str:
    """Get bind address from environment or use default"""
    return os.environ.get("HOST", DEFAULT_HOST)


def get_user_agent() -> str:
    """Get user agent from environment or use default"""
    return os.environ.get("USER_AGENT", DEFAULT_USER_AGENT)


def get_guidance_filing_limit() -> int:
    """Get number of filings scanned for guidance"""
    return _int_env("GUIDANCE_FILING_LIMIT", DEFAULT_GUIDANCE_FILING_LIMIT)
