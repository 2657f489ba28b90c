# Each worker process keeps its own contact form rate-limit windows
bind = "unix:/var/www/consulting-site/backend/gunicorn.sock"
workers = 2
worker_class = "sync"
worker_tmp_dir = "/dev/shm"
max_requests = 1000
max_requests_jitter = 100
timeout = 60  # Turnstile and Resend calls each time out after 10s
keepalive = 5

wsgi_app = "consulting_site.wsgi:application"

# Logging
accesslog = "/var/log/consulting-site/access.log"
errorlog = "/var/log/consulting-site/error.log"
loglevel = "info"
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Process naming
proc_name = "consulting-site-backend"

# Server mechanics
daemon = False
pidfile = "/var/run/consulting-site/gunicorn.pid"
user = "deploy"
group = "deploy"
umask = 0o007

# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting consulting site backend")

def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Consulting site backend is ready. Spawning workers")

def post_worker_init(worker):
    """Called after a worker has initialized the application."""
    worker.log.info("Worker %s started with an empty contact rate limiter", worker.pid)

def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal, usually a timeout."""
    worker.log.warning("Worker %s aborted; an upstream call may have hung", worker.pid)
