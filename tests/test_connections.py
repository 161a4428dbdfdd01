"""
Tests for the match request / match lifecycle against a real database session.
"""

from types import SimpleNamespace

import pytest
from sqlalchemy import func
from sqlalchemy.exc import OperationalError
from sqlalchemy.future import select

from skillswap.core.result import ErrorKind
from skillswap.db.models import Match, MatchRequest
from skillswap.match_service.connections import ConnectionService, MatchStatus, RequestStatus

pytestmark = pytest.mark.anyio


async def count_matches(session):
    return (await session.execute(select(func.count()).select_from(Match))).scalar_one()


@pytest.fixture
async def pair(make_user):
    alice = await make_user("Alice", skills_have=["python"], skills_to_learn=["guitar"])
    bob = await make_user("Bob", skills_have=["guitar"], skills_to_learn=["python"])
    return alice.id, bob.id


class TestMatchRequests:
    """Test cases for creating, accepting and rejecting requests."""

    async def test_duplicate_pending_request(self, session, pair):
        """A second request for the same ordered pair is refused."""
        alice, bob = pair
        service = ConnectionService(session)

        first = await service.create_match_request(alice, bob)
        assert first.is_success
        assert first.value.status == RequestStatus.PENDING

        second = await service.create_match_request(alice, bob)

        assert second.is_failure
        assert second.kind == ErrorKind.DUPLICATE_REQUEST

    async def test_reverse_direction_is_a_different_pair(self, session, pair):
        """Requests are keyed by ordered pair."""
        alice, bob = pair
        service = ConnectionService(session)

        assert (await service.create_match_request(alice, bob)).is_success
        assert (await service.create_match_request(bob, alice)).is_success

    async def test_request_to_self_or_missing_user(self, session, pair):
        alice, _ = pair
        service = ConnectionService(session)

        assert (await service.create_match_request(alice, alice)).kind == ErrorKind.VALIDATION_FAILURE
        assert (await service.create_match_request(alice, 999)).kind == ErrorKind.NOT_FOUND

    async def test_accept_creates_one_connected_match(self, session, pair):
        """Accepting spawns exactly one connected Match and flips the request."""
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value

        result = await service.accept_match_request(request.id, bob)

        assert result.is_success
        assert result.value.status == MatchStatus.CONNECTED
        assert set(result.value.users) == {alice, bob}
        assert await count_matches(session) == 1
        stored = await session.get(MatchRequest, request.id)
        assert stored.status == RequestStatus.ACCEPTED
        assert stored.match_id == result.value.id

    async def test_accept_twice_is_invalid(self, session, pair):
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value
        await service.accept_match_request(request.id)

        again = await service.accept_match_request(request.id)

        assert again.kind == ErrorKind.INVALID_STATE
        assert await count_matches(session) == 1

    async def test_only_target_may_answer(self, session, pair):
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value

        result = await service.accept_match_request(request.id, alice)

        assert result.kind == ErrorKind.FORBIDDEN

    async def test_reject_never_creates_match(self, session, pair):
        """Rejecting marks the request and leaves matches untouched."""
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value

        result = await service.reject_match_request(request.id, bob)

        assert result.is_success
        assert result.value.status == RequestStatus.REJECTED
        assert await count_matches(session) == 0
        # a rejected request no longer blocks a new one
        assert (await service.create_match_request(alice, bob)).is_success

    async def test_missing_request(self, session):
        service = ConnectionService(session)

        assert (await service.accept_match_request(42)).kind == ErrorKind.NOT_FOUND
        assert (await service.reject_match_request(42)).kind == ErrorKind.NOT_FOUND

    async def test_accept_rolls_back_when_second_write_fails(self, session, pair, monkeypatch):
        """Match creation and request update commit together or not at all."""
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value
        request_id = request.id

        async def broken_update(*args, **kwargs):
            raise OperationalError("UPDATE match_requests", {}, Exception("disk I/O error"))

        monkeypatch.setattr(service.notifications, "update_status", broken_update)
        result = await service.accept_match_request(request_id)

        assert result.kind == ErrorKind.BACKEND_FAILURE
        assert await count_matches(session) == 0
        stored = (await session.execute(select(MatchRequest).filter_by(id=request_id))).scalars().first()
        assert stored.status == RequestStatus.PENDING

    async def test_unique_index_catches_duplicate_the_check_missed(self, session, pair, monkeypatch):
        """Two requests racing past the pending check still leave one pending row."""
        alice, bob = pair
        service = ConnectionService(session)
        assert (await service.create_match_request(alice, bob)).is_success

        async def nothing_pending(*args, **kwargs):
            return None

        monkeypatch.setattr(service.notifications, "find_pending", nothing_pending)
        second = await service.create_match_request(alice, bob)

        assert second.kind == ErrorKind.DUPLICATE_REQUEST
        pending = await session.execute(
            select(func.count()).select_from(MatchRequest).where(MatchRequest.status == RequestStatus.PENDING)
        )
        assert pending.scalar_one() == 1

    async def test_stale_pending_read_cannot_accept_twice(self, session, pair, monkeypatch):
        """A second accept that read the request before the first committed creates no match."""
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value
        request_id = request.id
        assert (await service.accept_match_request(request_id)).is_success

        stale = SimpleNamespace(id=request_id, requester_id=alice, target_id=bob, status=RequestStatus.PENDING)

        async def stale_load(request_id, acting_user_id):
            return stale, None

        monkeypatch.setattr(service, "_load_pending", stale_load)
        again = await service.accept_match_request(request_id)
        rejected = await service.reject_match_request(request_id)

        assert again.kind == ErrorKind.INVALID_STATE
        assert rejected.kind == ErrorKind.INVALID_STATE
        assert await count_matches(session) == 1

    async def test_notifications_list_pending_with_requester(self, session, pair, make_user):
        alice, bob = pair
        carol = (await make_user("Carol", skills_have=["drums"])).id
        service = ConnectionService(session)
        await service.create_match_request(alice, bob)
        rejected = (await service.create_match_request(carol, bob)).value
        await service.reject_match_request(rejected.id)

        items = (await service.list_notifications(bob)).value

        assert len(items) == 1
        assert items[0]["requester"].name == "Alice"

    async def test_mark_read(self, session, pair):
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value

        result = await service.mark_notification_read(request.id, bob)

        assert result.value.is_read is True


class TestLearningSessions:
    """Test cases for the connected <-> in_session transitions."""

    async def connected_match(self, session, pair):
        alice, bob = pair
        service = ConnectionService(session)
        request = (await service.create_match_request(alice, bob)).value
        return (await service.accept_match_request(request.id)).value

    async def test_start_and_end(self, session, pair):
        match = await self.connected_match(session, pair)
        service = ConnectionService(session)

        started = await service.start_learning_session(match.id, "video")

        assert started.value.status == MatchStatus.IN_SESSION
        assert started.value.session_mode == "video"
        assert started.value.total_sessions == 1
        assert started.value.last_session_at is not None

        ended = await service.end_learning_session(match.id)

        assert ended.value.status == MatchStatus.CONNECTED

    async def test_start_on_pending_match_fails(self, session, pair):
        """A pending match cannot enter a session and stays pending."""
        alice, bob = pair
        service = ConnectionService(session)
        match = await service.matches.create(alice, bob)
        await session.commit()
        match_id = match.id

        result = await service.start_learning_session(match_id, "chat")

        assert result.kind == ErrorKind.INVALID_STATE
        stored = await service.matches.get(match_id)
        assert stored.status == MatchStatus.PENDING
        assert stored.total_sessions == 0

    async def test_cannot_start_twice(self, session, pair):
        match = await self.connected_match(session, pair)
        service = ConnectionService(session)
        await service.start_learning_session(match.id, "chat")

        assert (await service.start_learning_session(match.id, "chat")).kind == ErrorKind.INVALID_STATE

    async def test_end_without_session(self, session, pair):
        match = await self.connected_match(session, pair)

        result = await ConnectionService(session).end_learning_session(match.id)

        assert result.kind == ErrorKind.INVALID_STATE

    async def test_unknown_mode_and_outsider(self, session, pair, make_user):
        match_id = (await self.connected_match(session, pair)).id
        outsider = (await make_user("Eve")).id
        service = ConnectionService(session)

        assert (await service.start_learning_session(match_id, "telepathy")).kind == ErrorKind.VALIDATION_FAILURE
        assert (await service.start_learning_session(match_id, "chat", outsider)).kind == ErrorKind.FORBIDDEN
        assert (await service.start_learning_session(999, "chat")).kind == ErrorKind.NOT_FOUND


class TestFindMatches:
    """Test cases for the database-backed matcher."""

    async def test_excludes_matched_and_requested_users(self, session, pair, make_user):
        alice, bob = pair
        carol = (await make_user("Carol", skills_have=["guitar"])).id
        dave = (await make_user("Dave", skills_to_learn=["python"])).id
        service = ConnectionService(session)

        before = await service.find_matches(alice)
        assert {m.candidate.id for m in before.value} == {bob, carol, dave}

        request = (await service.create_match_request(alice, bob)).value
        await service.create_match_request(dave, alice)
        after_request = await service.find_matches(alice)
        assert [m.candidate.id for m in after_request.value] == [carol]

        await service.accept_match_request(request.id)
        after_accept = await service.find_matches(alice)
        assert [m.candidate.id for m in after_accept.value] == [carol]

    async def test_unknown_user(self, session):
        result = await ConnectionService(session).find_matches(123)

        assert result.kind == ErrorKind.NOT_FOUND
