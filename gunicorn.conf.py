"""
Gunicorn configuration for NoteVault.

Usage:
    gunicorn notevault.main:app -c gunicorn.conf.py
"""

import multiprocessing
import os

bind = os.getenv("BIND", "0.0.0.0:8000")

# CPU cores * 2 + 1, capped by WEB_CONCURRENCY when set
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() * 2 + 1))

# Uvicorn's ASGI worker for FastAPI
worker_class = "uvicorn.workers.UvicornWorker"

# Insight generation may wait on an LLM provider
timeout = 120
keepalive = 5

accesslog = "-"  # stdout
errorlog = "-"  # stderr
loglevel = "info"
