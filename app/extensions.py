"""
Flask extensions initialization.

The SQLAlchemy database is the content store (users, memberships, news,
events, registrations, activities).
"""
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate

# Content store
db = SQLAlchemy()

# Migrations
migrate = Migrate()
