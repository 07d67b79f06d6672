# Gunicorn configuration for the Voice Agent Demo Builder
# Usage: gunicorn -c gunicorn.conf.py "demo_builder:create_app()"

# The JSON record store is last-write-wins; keep a single worker process
workers = 1
worker_class = 'sync'
threads = 4

timeout = 30
graceful_timeout = 30
keepalive = 5

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Request handling
max_requests = 1000
max_requests_jitter = 50

# Bind
bind = '0.0.0.0:5000'
