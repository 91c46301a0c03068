# gunicorn_config.py
# Socket.IO needs a single worker; gevent handles the websocket connections
bind = "0.0.0.0:10000"
workers = 1
worker_class = "gevent"
timeout = 120
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = "info"
