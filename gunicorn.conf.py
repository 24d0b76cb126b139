"""Gunicorn configuration for production.

Run with: gunicorn -c gunicorn.conf.py 'zakat_engine:create_app()'
"""
import os

# Server socket
bind = os.environ.get('ZAKAT_BIND', '0.0.0.0:8080')

# Worker processes; calculations are CPU-bound and share no state
workers = int(os.environ.get('ZAKAT_WORKERS', '2'))
worker_class = 'sync'
timeout = 30
keepalive = 2

# Logging
accesslog = '-'
errorlog = '-'
loglevel = os.environ.get('ZAKAT_LOG_LEVEL', 'info').lower()

# Process naming
proc_name = 'zakat-engine'

# Server mechanics
daemon = False
pidfile = None
umask = 0
