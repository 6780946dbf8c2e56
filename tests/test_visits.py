from datetime import datetime, timezone

import httpx

from iotlock.core.results import ErrorKind
from iotlock.schemas.visit import RemoteVisit, Visit, VisitPage, VisitStatus, map_remote_status

from conftest import mock_context, seed_visits

SIGNED_IN_USER = {"user_id": "1", "name": "A", "email": "a@b.com", "access_token": "tok"}


def test_remote_status_mapping():
    assert map_remote_status("granted") == VisitStatus.accepted
    assert map_remote_status("approved") == VisitStatus.accepted
    assert map_remote_status("denied") == VisitStatus.rejected
    assert map_remote_status("rejected") == VisitStatus.rejected
    assert map_remote_status("pending") == VisitStatus.pending
    assert map_remote_status(None) == VisitStatus.pending
    assert map_remote_status("something-new") == VisitStatus.pending


def test_visit_from_remote_record():
    remote = RemoteVisit.model_validate(
        {
            "id": 42,
            "visitor_name": None,
            "image_url": "https://img/1.jpg",
            "timestamp": "2024-05-01T09:30:00",
            "status": "granted",
            "visitor_id": 3,
            "owner_id": 1,
        }
    )
    visit = Visit.from_remote(remote, fallback_photo="https://fallback")

    assert visit.id == "42"
    assert visit.visitor_name == "Unknown Visitor"
    assert visit.photo_url == "https://img/1.jpg"
    assert (visit.date, visit.time) == ("2024-05-01", "09:30")
    assert visit.status == VisitStatus.accepted
    assert visit.visitor_id == 3


def test_visit_without_photo_or_timestamp_uses_fallbacks():
    now = datetime(2024, 1, 2, 3, 4)
    visit = Visit.from_remote(RemoteVisit(id="1"), fallback_photo="https://fallback", now=now)
    assert visit.photo_url == "https://fallback"
    assert (visit.date, visit.time) == ("2024-01-02", "03:04")


def test_profile_image_preferred_over_capture():
    remote = RemoteVisit(
        id="1",
        profile_image_url="https://profile",
        image_url="https://capture",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )
    assert Visit.from_remote(remote, fallback_photo="").photo_url == "https://profile"


def test_page_tolerates_missing_fields():
    page = VisitPage.model_validate({"visits": None, "total_visits": None})
    assert page.visits == []
    assert page.total_visits == 0


async def test_first_page_replaces_and_next_page_appends(signed_in, db, owner):
    seed_visits(db, owner.id, 25)
    visits = signed_in.visits

    assert await visits.fetch_page(1)
    assert len(visits.visits) == 10
    assert visits.visits[0].visitor_name == "Visitor 24"
    assert visits.total == 25
    assert visits.has_more

    assert await visits.load_more()
    assert visits.page == 2
    assert len(visits.visits) == 20
    assert len({visit.id for visit in visits.visits}) == 20
    assert visits.visits[10].visitor_name == "Visitor 14"

    assert await visits.load_more()
    assert len(visits.visits) == 25
    assert not visits.has_more

    assert await visits.load_more() is None
    assert len(visits.visits) == 25


async def test_has_more_turns_false_exactly_at_total(signed_in, db, owner):
    seed_visits(db, owner.id, 20)
    visits = signed_in.visits

    await visits.fetch_page(1)
    assert visits.has_more
    await visits.load_more()
    assert len(visits.visits) == 20
    assert not visits.has_more


async def test_refetching_page_one_replaces_list(signed_in, db, owner):
    seed_visits(db, owner.id, 12)
    visits = signed_in.visits
    await visits.fetch_page(1)
    await visits.load_more()
    assert len(visits.visits) == 12

    assert await visits.refresh()
    assert len(visits.visits) == 10
    assert visits.page == 1
    assert visits.has_more


async def test_empty_history(signed_in):
    assert await signed_in.visits.fetch_page(1)
    assert signed_in.visits.visits == []
    assert not signed_in.visits.has_more
    assert signed_in.visits.error is None


async def test_fetch_requires_user(ctx):
    outcome = await ctx.visits.fetch_page(1)
    assert outcome.kind == ErrorKind.not_authenticated
    assert ctx.visits.error == "User not authenticated"
    assert not ctx.visits.is_loading


async def test_failed_fetch_keeps_list_and_stops_paging(settings):
    pages = {"fail": False}

    def handler(request):
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json=SIGNED_IN_USER)
        if pages["fail"]:
            return httpx.Response(500, json={"detail": "Database unavailable"})
        visits = [{"id": index, "visitor_name": f"V{index}", "status": "pending"} for index in range(10)]
        return httpx.Response(200, json={"visits": visits, "total_visits": 30})

    ctx = mock_context(settings, handler)
    await ctx.auth.login("a@b.com", "secret")
    await ctx.visits.fetch_page(1)
    assert ctx.visits.has_more

    pages["fail"] = True
    outcome = await ctx.visits.load_more()

    assert not outcome
    assert ctx.visits.error == "Database unavailable"
    assert not ctx.visits.has_more
    assert ctx.visits.page == 1
    assert len(ctx.visits.visits) == 10
    assert await ctx.visits.load_more() is None

    # Manual retry of the same page.
    pages["fail"] = False
    assert await ctx.visits.fetch_page(2)
    assert ctx.visits.error is None
    await ctx.aclose()


async def test_overlapping_pages_are_deduplicated(settings):
    def handler(request):
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json=SIGNED_IN_USER)
        page = int(request.url.params["page"])
        # A visit arriving between requests shifts page 2 by one entry.
        start = 0 if page == 1 else 9
        visits = [{"id": index, "status": "pending"} for index in range(start, start + 10)]
        return httpx.Response(200, json={"visits": visits, "total_visits": 19})

    ctx = mock_context(settings, handler)
    await ctx.auth.login("a@b.com", "secret")
    await ctx.visits.fetch_page(1)
    assert ctx.visits.has_more

    outcome = await ctx.visits.load_more()

    assert outcome
    assert len(outcome.data) == 10
    assert [visit.id for visit in ctx.visits.visits] == [str(index) for index in range(19)]
    assert not ctx.visits.has_more
    assert await ctx.visits.load_more() is None
    await ctx.aclose()


async def test_limit_and_page_are_sent(settings):
    seen = []

    def handler(request):
        if request.url.path == "/api/auth/login":
            return httpx.Response(200, json=SIGNED_IN_USER)
        seen.append((request.url.path, dict(request.url.params), request.headers["Authorization"]))
        return httpx.Response(200, json={"visits": [], "total_visits": 0})

    ctx = mock_context(settings, handler)
    await ctx.auth.login("a@b.com", "secret")
    await ctx.visits.fetch_page(3)

    assert seen == [("/api/visits/1", {"page": "3", "limit": "10"}, "Bearer tok")]
    await ctx.aclose()


async def test_pending_views(signed_in, db, owner):
    seed_visits(db, owner.id, 2, status="granted")
    seed_visits(db, owner.id, 3)
    await signed_in.visits.fetch_page(1)

    assert signed_in.visits.pending_count == 3
    assert all(visit.is_pending for visit in signed_in.visits.pending_visits)
