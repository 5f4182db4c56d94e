# Gunicorn settings for `gunicorn -c gunicorn.conf.py "app:create_app()"`.
import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8082")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
# Refresh rotation is safe across threads and workers (compare-and-delete in the store).
threads = int(os.getenv("GUNICORN_THREADS", "4"))
# Provider calls time out after OAUTH_HTTP_TIMEOUT; keep the worker timeout above it.
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = 30
keepalive = 5

# Logs go to stdout/stderr; the app itself emits JSON lines.
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ProxyFix in the app handles X-Forwarded-*; gunicorn trusts the same upstream.
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")
proxy_protocol = False
