"""Tests for the ``flask account`` commands."""

from datetime import datetime, timedelta, timezone

import pytest

from escout import create_app
from escout.config import TestingConfig
from escout.extensions import db
from escout.models import Account, AccountRole, OtpPurpose


@pytest.fixture
def app():
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


def _account(email):
    return Account.query.filter_by(email=email).first()


def test_create_account(runner, app):
    result = runner.invoke(args=[
        'account', 'create', '--email', 'Org@X.com', '--password', 'secret1', '--role', 'organization',
    ])

    assert result.exit_code == 0
    assert 'Account created successfully!' in result.output
    account = _account('org@x.com')
    assert account.role == AccountRole.ORGANIZATION
    assert account.is_verified is True
    assert account.check_password('secret1')


def test_create_unverified_account(runner, app):
    runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret1', '--unverified'])
    assert _account('p@x.com').is_verified is False


def test_create_duplicate_account(runner, app):
    runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret1'])
    result = runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret2'])

    assert 'already exists' in result.output
    assert Account.query.count() == 1


def test_set_password(runner, app):
    runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret1'])
    result = runner.invoke(args=['account', 'set-password', '--email', 'p@x.com', '--password', 'changed9'])

    assert 'Password updated.' in result.output
    account = _account('p@x.com')
    assert account.check_password('changed9')
    assert not account.check_password('secret1')


def test_set_password_unknown_account(runner, app):
    result = runner.invoke(args=['account', 'set-password', '--email', 'ghost@x.com', '--password', 'x'])
    assert 'No account ghost@x.com found' in result.output


def test_verify_account(runner, app):
    runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret1', '--unverified'])
    account = _account('p@x.com')
    account.set_otp('123456', datetime.now(timezone.utc) + timedelta(minutes=5), OtpPurpose.SIGNUP)
    db.session.commit()

    result = runner.invoke(args=['account', 'verify', '--email', 'p@x.com'])

    assert result.exit_code == 0
    account = _account('p@x.com')
    assert account.is_verified is True
    assert account.otp is None


def test_purge_otps(runner, app):
    runner.invoke(args=['account', 'create', '--email', 'p@x.com', '--password', 'secret1', '--unverified'])
    account = _account('p@x.com')
    account.set_otp('123456', datetime.now(timezone.utc) - timedelta(minutes=1), OtpPurpose.SIGNUP)
    db.session.commit()

    result = runner.invoke(args=['account', 'purge-otps'])

    assert 'Purged 1 expired OTP(s).' in result.output
    assert _account('p@x.com').otp is None
