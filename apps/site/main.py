"""HTTP entry point for the static front-end."""

import os

from apps.site import SiteHost
from lib.telemetry.logger import configure_logging

host = SiteHost(config_path=os.getenv("TOON_SITE_CONFIG", "config/site.yaml"))
configure_logging(host.config.log_level)
app = host.build_app()
