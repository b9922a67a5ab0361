"""
CLI Commands for Anamola.

Provides Flask CLI commands for member administration.

Usage:
    flask members promote admin@anamola.org       # Grant the admin role
    flask members demote admin@anamola.org        # Back to a regular member
    flask members set-status a@b.com suspended    # Change membership status
"""
from .members import init_app as init_member_commands


def init_app(app):
    """Register all CLI commands with the Flask app."""
    init_member_commands(app)
