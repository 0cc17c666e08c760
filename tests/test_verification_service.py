"""Tests for the verification code ledger"""

from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tradehub.models import EmailVerification
from tradehub.services.errors import CodeExpiredError, InvalidCodeError, NotFoundError
from tradehub.services.verification_service import VerificationLedger, generate_code

EMAIL = "jane@x.com"


class FakeClock:
    """Clock that only moves when told to"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0))


@pytest.fixture
def ledger(db_session: AsyncSession, clock: FakeClock) -> VerificationLedger:
    return VerificationLedger(db_session, clock=clock)


def test_generate_code_is_six_digits():
    for _ in range(50):
        code = generate_code()
        assert len(code) == 6
        assert code.isdigit()
        assert code[0] != "0"


@pytest.mark.asyncio
class TestIssue:
    """Test code issuance"""

    async def test_issue_creates_record(self, ledger: VerificationLedger, db_session: AsyncSession, clock: FakeClock):
        issued = await ledger.issue(EMAIL)

        assert issued.email == EMAIL
        assert len(issued.code) == 6
        assert issued.expires_at == clock.now + timedelta(minutes=10)

        record = (await db_session.execute(
            select(EmailVerification).where(EmailVerification.email == EMAIL)
        )).scalar_one()
        assert record.code == issued.code

    async def test_reissue_overwrites_in_place(self, db_session: AsyncSession, clock: FakeClock):
        codes = iter(["111111", "222222"])
        ledger = VerificationLedger(db_session, clock=clock, code_factory=lambda: next(codes))

        await ledger.issue(EMAIL)
        clock.advance(timedelta(minutes=5))
        second = await ledger.issue(EMAIL)

        count = (await db_session.execute(
            select(func.count()).select_from(EmailVerification).where(EmailVerification.email == EMAIL)
        )).scalar_one()
        assert count == 1
        assert second.code == "222222"
        assert second.expires_at == clock.now + timedelta(minutes=10)

        # Only the latest code is accepted
        with pytest.raises(InvalidCodeError):
            await ledger.verify(EMAIL, "111111")
        assert await ledger.verify(EMAIL, "222222") is True


@pytest.mark.asyncio
class TestVerify:
    """Test code verification and expiry ordering"""

    async def test_unknown_email(self, ledger: VerificationLedger):
        with pytest.raises(NotFoundError):
            await ledger.verify("nobody@x.com", "123456")

    async def test_accepted_until_expiry(self, ledger: VerificationLedger, clock: FakeClock):
        issued = await ledger.issue(EMAIL)

        assert await ledger.verify(EMAIL, issued.code) is True

        clock.advance(timedelta(minutes=9, seconds=59))
        assert await ledger.verify(EMAIL, issued.code) is True

    async def test_expired_at_exact_boundary(self, ledger: VerificationLedger, clock: FakeClock):
        issued = await ledger.issue(EMAIL)
        clock.advance(timedelta(minutes=10))

        with pytest.raises(CodeExpiredError):
            await ledger.verify(EMAIL, issued.code)

    async def test_wrong_code_before_expiry(self, ledger: VerificationLedger):
        issued = await ledger.issue(EMAIL)
        wrong = "000000" if issued.code != "000000" else "999999"

        with pytest.raises(InvalidCodeError):
            await ledger.verify(EMAIL, wrong)

    async def test_wrong_code_after_expiry_is_invalid_not_expired(
        self, ledger: VerificationLedger, clock: FakeClock
    ):
        issued = await ledger.issue(EMAIL)
        clock.advance(timedelta(hours=1))
        wrong = "000000" if issued.code != "000000" else "999999"

        with pytest.raises(InvalidCodeError):
            await ledger.verify(EMAIL, wrong)

    async def test_code_reusable_within_ttl_by_default(self, ledger: VerificationLedger):
        issued = await ledger.issue(EMAIL)

        assert await ledger.verify(EMAIL, issued.code) is True
        assert await ledger.verify(EMAIL, issued.code) is True

    async def test_single_use_deletes_record(self, db_session: AsyncSession, clock: FakeClock):
        ledger = VerificationLedger(db_session, single_use=True, clock=clock)
        issued = await ledger.issue(EMAIL)

        assert await ledger.verify(EMAIL, issued.code) is True

        with pytest.raises(NotFoundError):
            await ledger.verify(EMAIL, issued.code)

    async def test_custom_ttl(self, db_session: AsyncSession, clock: FakeClock):
        ledger = VerificationLedger(db_session, ttl=timedelta(minutes=1), clock=clock)
        issued = await ledger.issue(EMAIL)
        clock.advance(timedelta(minutes=1))

        with pytest.raises(CodeExpiredError):
            await ledger.verify(EMAIL, issued.code)
