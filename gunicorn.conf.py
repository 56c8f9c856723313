# Gunicorn configuration for the Alkitu site
# Form rate limit counters live in each worker's memory

# Worker settings
workers = 2
worker_class = 'sync'

# Timeout settings
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

# Entry point: gunicorn -c gunicorn.conf.py "alkitu:create_app('production')"
