"""Configuration for Music Relay.

Startup-only settings for the server process, read from environment variables.
Routing policy (allowed hosts, referers, upstream API) is compiled in and is
not configurable here.
"""

import os

# Server settings (startup-only)
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8080"))

# Debug mode (enables auto-reload in development)
DEBUG = os.getenv("DEBUG", "false").lower() in ("true", "1", "yes")

# Log level for application loggers when run as a script
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
