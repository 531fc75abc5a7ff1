"""Account management CLI commands."""

import click
from flask.cli import with_appcontext

from escout.extensions import db
from escout.models import Account, AccountRole
from escout.services.otp import normalize_email, purge_expired_otps


def _get_account(email: str) -> Account | None:
    return db.session.query(Account).filter_by(email=normalize_email(email)).first()


@click.group('account')
def account_commands():
    """Account management commands."""
    pass


@account_commands.command('create')
@click.option('--email', required=True, help='Account email')
@click.option('--password', required=True, help='Account password')
@click.option('--role', type=click.Choice([r.value for r in AccountRole]), default=AccountRole.PLAYER.value, show_default=True)
@click.option('--verified/--unverified', default=True, show_default=True, help='Skip the OTP step')
@with_appcontext
def create_account(email, password, role, verified):
    """Create an account without going through signup."""
    if _get_account(email):
        click.echo(click.style(f'Error: Account with email "{email}" already exists', fg='red'))
        return

    account = Account(email=normalize_email(email), role=AccountRole(role), is_verified=verified)
    account.set_password(password)
    db.session.add(account)
    db.session.commit()

    click.echo(click.style('Account created successfully!', fg='green'))
    click.echo(f'  Email: {account.email}')
    click.echo(f'  Role: {role}')
    click.echo(f'  Verified: {verified}')


@account_commands.command('set-password')
@click.option('--email', required=True, help='Account email')
@click.option('--password', required=True, help='New password')
@with_appcontext
def set_password(email, password):
    """Set or reset an account's password."""
    account = _get_account(email)
    if not account:
        click.echo(click.style(f'Error: No account {email} found', fg='red'))
        return

    account.set_password(password)
    account.forget_refresh_token()
    db.session.commit()
    click.echo(click.style('Password updated.', fg='green'))


@account_commands.command('verify')
@click.option('--email', required=True, help='Account email')
@with_appcontext
def verify_account(email):
    """Mark an account verified and drop any pending code."""
    account = _get_account(email)
    if not account:
        click.echo(click.style(f'Error: No account {email} found', fg='red'))
        return

    account.is_verified = True
    account.clear_otp()
    db.session.commit()
    click.echo(click.style(f'{account.email} verified.', fg='green'))


@account_commands.command('purge-otps')
@with_appcontext
def purge_otps():
    """Clear one-time codes that have expired."""
    purged = purge_expired_otps()
    click.echo(f'Purged {purged} expired OTP(s).')
