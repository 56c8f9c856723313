#!/usr/bin/env python3
"""
Alkitu Site - Development Server
Production runs under gunicorn (see gunicorn.conf.py)
"""
import os

from dotenv import load_dotenv
load_dotenv()

from alkitu import create_app, __version__

app = create_app()


if __name__ == '__main__':
    host = os.environ.get('HOST', '127.0.0.1')
    port = int(os.environ.get('PORT', 5000))
    debug = app.config.get('DEBUG', False)
    site_url = app.config['SITE_URL']

    print(f"Alkitu Site v{__version__} ({'debug' if debug else 'no debug'})")
    for lang in app.config['SUPPORTED_LOCALES']:
        print(f"  {lang}: {site_url}/{lang}/")
    print(f"  API: {site_url}/api   Health: {site_url}/health")

    app.run(host=host, port=port, debug=debug)
