"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# The dashboard session lives in process memory, so every request must reach
# the same worker.
worker_class = "uvicorn.workers.UvicornWorker"
workers = 1

timeout = 60

# Graceful timeout for shutdown
graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (commonly 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("STUDIO_LOG_LEVEL", "info").lower()

wsgi_app = "studio.main:app"
