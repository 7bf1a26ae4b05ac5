"""Site-wide settings read from environment variables."""

import os

DEFAULT_DOMAIN = 'localhost:8000'


def domain() -> str:
    """Return the public host the site is served from."""
    return os.environ.get('DOMAIN', DEFAULT_DOMAIN)


def home_url() -> str:
    """Return the absolute URL of the site root.

    Local hosts are served over http, everything else over https.
    """
    host = domain().lstrip('.')
    scheme = 'http' if host.startswith(('localhost', '127.0.0.1')) else 'https'
    return f'{scheme}://{host}'
