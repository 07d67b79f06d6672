#!/usr/bin/env python3
"""
Voice Agent Demo Builder - Development Server
Production runs under gunicorn (see gunicorn.conf.py)
"""
import os

from dotenv import load_dotenv
load_dotenv()

from demo_builder import create_app

app = create_app()


if __name__ == '__main__':
    host = os.environ.get('HOST', '127.0.0.1')
    port = int(os.environ.get('PORT', 5000))
    debug = app.config.get('DEBUG', False)

    print(f"Voice Agent Demo Builder on http://{host}:{port}")
    print(f"  clients:    http://{host}:{port}/api/clients/")
    print(f"  demo links: http://{host}:{port}/api/demo-links/")
    print(f"  records in: {os.path.abspath(app.config['DATA_DIR'])}")

    app.run(host=host, port=port, debug=debug)
