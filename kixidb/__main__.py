from .cli import db

db()
