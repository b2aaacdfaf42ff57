"""
Gunicorn configuration for the Math Challenge server.
Optimized for Socket.IO with eventlet workers.
"""

import logging
import sys

from config_factory import load_config, ConfigError


def on_starting(server):
    """
    Server hook that runs when the master process is starting.
    Validates the configuration before workers are forked so a bad
    environment stops the server instead of every worker.
    """
    logger = logging.getLogger(__name__)
    try:
        load_config()
    except ConfigError as e:
        logger.critical(f"FATAL: Invalid configuration. Server shutting down. Error: {e}")
        sys.exit(1)


# Load configuration (renamed to avoid conflicts with gunicorn's internal 'config')
app_config = load_config()

# Server socket
bind = f"{app_config.host}:{app_config.port}"
backlog = 2048

# Worker processes
workers = 1  # Must be 1: rooms live in process memory
worker_class = "eventlet"
worker_connections = app_config.worker_connections
timeout = app_config.timeout
keepalive = app_config.keepalive

# Logging
accesslog = "-"
errorlog = "-"
loglevel = app_config.log_level
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# Process naming
proc_name = "math-challenge"

# Server mechanics
preload_app = False  # Don't preload for Socket.IO
daemon = False
pidfile = None
user = None
group = None
tmp_upload_dir = None

# SSL (for production)
keyfile = None
certfile = None
