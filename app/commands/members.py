"""
CLI Commands for member administration.

The first admin has to be created from the shell; after that admins can
manage member status from the dashboard.
"""

import click
from flask.cli import with_appcontext
from ..extensions import db
from ..models import Member, MEMBERSHIP_STATUSES
from ..services.membership_service import MembershipService
from ..utils.exceptions import InvalidRequestError


@click.group('members')
def members_cli():
    """Member administration commands."""
    pass


def _get_member(email):
    member = Member.query.filter_by(email=email.strip()).first()
    if not member:
        raise click.ClickException(f"No member with email {email}")
    return member


@members_cli.command('promote')
@click.argument('email')
@with_appcontext
def promote(email):
    """Give a member the admin role."""
    member = _get_member(email)
    member.role = 'admin'
    db.session.commit()
    click.echo(f"{member.email} ({member.member_id}) is now an admin")


@members_cli.command('demote')
@click.argument('email')
@with_appcontext
def demote(email):
    """Return an admin to the member role."""
    member = _get_member(email)
    member.role = 'member'
    db.session.commit()
    click.echo(f"{member.email} ({member.member_id}) is now a member")


@members_cli.command('set-status')
@click.argument('email')
@click.argument('status', type=click.Choice(MEMBERSHIP_STATUSES))
@with_appcontext
def set_status(email, status):
    """Set a member's membership status."""
    member = _get_member(email)
    try:
        MembershipService.update_status(member, status)
    except InvalidRequestError as e:
        raise click.ClickException(e.message)
    click.echo(f"{member.email} membership status: {member.membership_status}")


def init_app(app):
    """Register CLI commands with the Flask app."""
    app.cli.add_command(members_cli)
