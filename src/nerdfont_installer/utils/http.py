"""HTTP session setup shared by the catalog, release and download clients."""

import requests

from nerdfont_installer.core.config import InstallerConfig


def create_session(config: InstallerConfig) -> requests.Session:
    """Create HTTP session with appropriate configuration."""
    session = requests.Session()
    session.headers.update({"User-Agent": config.user_agent})
    return session
