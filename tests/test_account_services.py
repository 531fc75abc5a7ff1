"""Tests for the OTP, email and account services below the HTTP layer."""

import re
from datetime import datetime, timedelta, timezone

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from escout import create_app
from escout.config import TestingConfig
from escout.extensions import db
from escout.models import Account, AccountRole, AuditLog, OtpPurpose, as_utc
from escout.services import accounts
from escout.services.email import send_otp_email
from escout.services.exceptions import (
    AccountNotFound,
    AccountUnverified,
    DuplicateEmail,
    InvalidCredentials,
    InvalidToken,
    OtpExpired,
    OtpMismatch,
)
from escout.services.otp import (
    check_otp,
    dispatch_otp,
    generate_otp,
    issue_otp,
    purge_expired_otps,
)


@pytest.fixture
def app():
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def quiet_email(monkeypatch):
    monkeypatch.setattr('escout.services.otp.send_otp_email', lambda *a, **kw: True)


@pytest.fixture
def account(app):
    account = Account(email='player@x.com', role=AccountRole.PLAYER)
    account.set_password('secret1')
    db.session.add(account)
    db.session.commit()
    return account


class FakeQueueService:
    jobs = []

    def __init__(self, redis_url):
        self.redis_url = redis_url

    def enqueue_otp_email(self, to_email, otp, purpose):
        self.jobs.append((to_email, otp, purpose))


class BrokenQueueService(FakeQueueService):

    def enqueue_otp_email(self, to_email, otp, purpose):
        raise RedisConnectionError("redis is down")


class TestOtpGeneration:

    def test_codes_are_six_digits(self):
        for _ in range(200):
            assert re.fullmatch(r'\d{6}', generate_otp())

    def test_codes_vary(self):
        assert len({generate_otp() for _ in range(50)}) > 1


class TestIssueOtp:

    def test_sets_all_otp_fields(self, app, account, quiet_email):
        before = datetime.now(timezone.utc)
        assert issue_otp(account, OtpPurpose.SIGNUP) is True

        assert re.fullmatch(r'\d{6}', account.otp)
        assert account.otp_purpose == OtpPurpose.SIGNUP
        expires = as_utc(account.otp_expires_at)
        assert before + timedelta(minutes=9) < expires <= datetime.now(timezone.utc) + timedelta(minutes=10)

    def test_reissue_is_last_write_wins(self, app, account, quiet_email):
        issue_otp(account, OtpPurpose.SIGNUP)
        issue_otp(account, OtpPurpose.RESET_PASSWORD)

        assert account.otp_purpose == OtpPurpose.RESET_PASSWORD

    def test_dispatch_failure_is_reported_not_raised(self, app, account, monkeypatch):
        monkeypatch.setattr('escout.services.otp.send_otp_email', lambda *a, **kw: False)

        assert issue_otp(account, OtpPurpose.SIGNUP) is False
        assert account.otp is not None


class TestDispatch:

    def test_queue_used_when_enabled(self, app, monkeypatch):
        FakeQueueService.jobs = []
        monkeypatch.setattr('escout.services.queue.QueueService', FakeQueueService)
        app.config['EMAIL_QUEUE_ENABLED'] = True

        assert dispatch_otp('player@x.com', '123456', OtpPurpose.SIGNUP) is True
        assert FakeQueueService.jobs == [('player@x.com', '123456', 'signup')]

    def test_queue_failure_is_logged(self, app, monkeypatch):
        monkeypatch.setattr('escout.services.queue.QueueService', BrokenQueueService)
        app.config['EMAIL_QUEUE_ENABLED'] = True

        assert dispatch_otp('player@x.com', '123456', OtpPurpose.SIGNUP) is False

    def test_malformed_redis_url_is_logged(self, app):
        app.config['EMAIL_QUEUE_ENABLED'] = True
        app.config['REDIS_URL'] = 'not-a-redis-url'

        assert dispatch_otp('player@x.com', '123456', OtpPurpose.SIGNUP) is False


class TestEmail:

    def test_development_mode_logs_instead_of_sending(self, app):
        assert send_otp_email('player@x.com', '123456', OtpPurpose.SIGNUP) is True

    def test_missing_smtp_settings(self, app):
        app.config['EMAIL_ENABLED'] = True
        app.config['SMTP_HOST'] = None

        assert send_otp_email('player@x.com', '123456', 'reset_password') is False


class TestVerificationGate:

    def test_unknown_email(self, app):
        with pytest.raises(AccountNotFound):
            check_otp('ghost@x.com', '123456', OtpPurpose.SIGNUP)

    def test_no_pending_code(self, app, account):
        with pytest.raises(OtpMismatch):
            check_otp('player@x.com', '123456', OtpPurpose.SIGNUP)

    def test_expired_checked_before_mismatch(self, app, account):
        account.set_otp('123456', datetime.now(timezone.utc) - timedelta(seconds=1), OtpPurpose.SIGNUP)
        db.session.commit()

        with pytest.raises(OtpExpired):
            check_otp('player@x.com', '654321', OtpPurpose.SIGNUP)

    def test_mismatch(self, app, account):
        account.set_otp('123456', datetime.now(timezone.utc) + timedelta(minutes=5), OtpPurpose.SIGNUP)
        db.session.commit()

        with pytest.raises(OtpMismatch):
            check_otp('player@x.com', '654321', OtpPurpose.SIGNUP)

    def test_wrong_purpose(self, app, account):
        account.set_otp('123456', datetime.now(timezone.utc) + timedelta(minutes=5), OtpPurpose.SIGNUP)
        db.session.commit()

        with pytest.raises(OtpMismatch):
            check_otp('player@x.com', '123456', OtpPurpose.RESET_PASSWORD)

    def test_match_is_case_insensitive_on_email(self, app, account):
        account.set_otp('123456', datetime.now(timezone.utc) + timedelta(minutes=5), OtpPurpose.SIGNUP)
        db.session.commit()

        assert check_otp(' Player@X.com', '123456', OtpPurpose.SIGNUP).id == account.id

    def test_naive_expiry_treated_as_utc(self, app, account):
        naive_future = (datetime.now(timezone.utc) + timedelta(minutes=5)).replace(tzinfo=None)
        account.otp_expires_at = naive_future
        assert account.is_otp_expired() is False


class TestPurge:

    def test_only_expired_codes_are_cleared(self, app, quiet_email):
        stale = Account(email='stale@x.com', role=AccountRole.PLAYER)
        fresh = Account(email='fresh@x.com', role=AccountRole.ORGANIZATION)
        for a in (stale, fresh):
            a.set_password('secret1')
        stale.set_otp('111111', datetime.now(timezone.utc) - timedelta(minutes=1), OtpPurpose.SIGNUP)
        fresh.set_otp('222222', datetime.now(timezone.utc) + timedelta(minutes=5), OtpPurpose.SIGNUP)
        db.session.add_all([stale, fresh])
        db.session.commit()

        assert purge_expired_otps() == 1
        assert stale.otp is None and stale.otp_expires_at is None and stale.otp_purpose is None
        assert fresh.otp == '222222'


class TestAccountService:

    def test_login_order_unverified_before_password(self, app, account):
        with pytest.raises(AccountUnverified):
            accounts.login('player@x.com', 'wrong-password')

    def test_login_unknown(self, app):
        with pytest.raises(AccountNotFound):
            accounts.login('ghost@x.com', 'secret1')

    def test_login_bad_password(self, app, account):
        account.is_verified = True
        db.session.commit()

        with pytest.raises(InvalidCredentials):
            accounts.login('player@x.com', 'wrong-password')

    def test_refresh_after_account_logout(self, app, account):
        account.is_verified = True
        db.session.commit()
        session = accounts.login('player@x.com', 'secret1')

        accounts.logout(account.id)

        with pytest.raises(InvalidToken):
            accounts.refresh_access_token(session['refreshToken'])

    def test_refresh_does_not_rotate(self, app, account):
        account.is_verified = True
        db.session.commit()
        session = accounts.login('player@x.com', 'secret1')
        stored = account.refresh_token_hash

        accounts.refresh_access_token(session['refreshToken'])
        accounts.refresh_access_token(session['refreshToken'])

        assert account.refresh_token_hash == stored

    def test_signup_writes_audit_entry(self, app, quiet_email):
        created = accounts.signup('new@x.com', 'secret1', 'organization')

        entry = AuditLog.query.filter_by(account_id=created.id, action='signup').first()
        assert entry is not None
        assert entry.meta['ip_address'] is None

    def test_signup_race_on_unique_email(self, app, account, quiet_email, monkeypatch):
        # Another request inserted the row after this one checked for it
        monkeypatch.setattr('escout.services.accounts.find_account', lambda email: None)

        with pytest.raises(DuplicateEmail):
            accounts.signup('player@x.com', 'secret2', 'player')

        assert Account.query.count() == 1
