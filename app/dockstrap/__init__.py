"""dockstrap - Docker Engine installer for Linux hosts."""

import logging

__version__ = "1.0.0"

# Handlers are attached by dockstrap.core.logs.setup_logging() at run time.
logging.getLogger(__name__).addHandler(logging.NullHandler())
