import os

wsgi_app = "storefront.wsgi:application"


def cpu():
    return max(1, (os.cpu_count() or 1))


# Worker processes
workers = min(max(2, cpu() * 2), 8)

# Threads per worker; order placement and payment-link calls block on IO
worker_class = "gthread"
threads = int(os.getenv("GTHREADS", "4"))

# Timeouts; keep above HTTP_TIMEOUT_SECS times HTTP_RETRY_MAX for provider calls
timeout = int(os.getenv("GUNI_TIMEOUT", "60"))
graceful_timeout = int(os.getenv("GUNI_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.getenv("GUNI_KEEPALIVE", "5"))

preload_app = True
max_requests = int(os.getenv("GUNI_MAX_REQUESTS", "2000"))
max_requests_jitter = int(os.getenv("GUNI_MAX_REQUESTS_JITTER", "200"))

# Application logs go through the JSON formatter in settings.LOGGING
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("GUNI_LOGLEVEL", "info")
