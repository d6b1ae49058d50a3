import os

# Bind to the port provided via the PORT environment variable, defaulting to
# 5000.
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"

# The dashboard view cache lives in process memory and revalidate_path only
# clears the cache of the process that handled the write, so exactly one
# worker serves every request. Concurrency comes from threads instead;
# ViewCache is lock-guarded.
worker_class = "gthread"
workers = 1
threads = int(os.getenv("GUNICORN_THREADS", "4"))
timeout = int(os.getenv("GUNICORN_TIMEOUT", "30"))

# Serve the application object created by run.py.
wsgi_app = "run:app"
