"""
Gunicorn configuration for the Anamola API.
"""
import os

# Bind to the platform's PORT or default
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# Worker configuration - sync workers, one request per worker at a time
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
worker_class = 'sync'
timeout = 60  # Stripe and Supabase calls happen inside the request
keepalive = 5

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.getenv('LOG_LEVEL', 'info').lower()
capture_output = True

# Process naming
proc_name = 'anamola-api'

preload_app = True

# Graceful restart
graceful_timeout = 30


def on_starting(server):
    print("[Gunicorn] Starting Anamola API server...")


def on_exit(server):
    print("[Gunicorn] Anamola API server shutting down...")
