"""Single entry point — starts the studio server.

Usage:
    studio-server
    python3 -m studio_server.run

Environment variables (all optional):
    FLASK_PORT         port for the web server              (default 3000)
    FLASK_HOST         bind address                         (default 0.0.0.0)
    FLASK_DEBUG        1 = enable Flask reloader            (default 1)
    OPENAI_API_KEY     enables the remote model; without it bids and cards
                       come from the local rules only
"""
import logging

from .app import app
from .config import SERVER_CONFIG


def main():
    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    app.run(host=SERVER_CONFIG['host'], port=SERVER_CONFIG['port'],
            debug=SERVER_CONFIG['debug'])


if __name__ == '__main__':
    main()
