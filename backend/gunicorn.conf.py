# gunicorn.conf.py — Production server configuration.
#
# Run with:
#   gunicorn upcoming_events.api.main:app -c backend/gunicorn.conf.py

# Requests are short, read-only and hold no shared state
workers = 4
worker_class = "uvicorn.workers.UvicornWorker"

bind = "0.0.0.0:8000"

# Structured JSON is handled by upcoming_events/core/logging.py
accesslog = "-"
errorlog  = "-"
loglevel  = "info"

# Timeouts
timeout          = 30
keepalive        = 5
graceful_timeout = 30
