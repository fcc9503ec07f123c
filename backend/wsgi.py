# backend/wsgi.py
from wintrack import create_app

app = create_app()
