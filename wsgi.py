"""
WSGI / Flask CLI entry point.

Usage:
    flask --app wsgi run
    flask --app wsgi db upgrade          # apply migrations/
    flask --app wsgi seed-demo           # demo.com tenant + sample data
    gunicorn wsgi:app
"""

from app import create_app

app = create_app()
