"""
Voice Agent Demo Builder - Demo Link Tests
"""
import re
from datetime import timedelta

import pytest

from demo_builder.exceptions import SlugGenerationError
from demo_builder.models.client import create_client
from demo_builder.services import demo_link_service
from demo_builder.services.demo_link_service import (
    DemoLinkService,
    LinkStatus,
    check_link,
    generate_slug,
    slug_base
)


class TestSlugs:
    """Test slug generation"""

    def test_slug_format(self):
        slug = generate_slug("Joe's Plumbing & Heating")

        assert re.fullmatch(r'joes-plumbing-heating-[a-z0-9]{4}', slug)

    def test_base_truncated(self):
        base = slug_base("The Very Long Business Name Of Austin Texas Plumbers")

        assert len(base) == 30
        assert len(generate_slug("The Very Long Business Name Of Austin Texas Plumbers")) == 35

    def test_collapses_separators(self):
        assert slug_base("  A   --  B ") == "-a-b-"

    def test_collision_exhausts_attempts(self, data_service, clock, monkeypatch):
        client = create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        service = DemoLinkService(data_service, clock=clock, max_slug_attempts=3)
        service.create_link(client)

        taken = service.get_links_for_client(client.id)[0].slug
        calls = []

        def always_taken(name):
            calls.append(name)
            return taken

        monkeypatch.setattr(demo_link_service, 'generate_slug', always_taken)

        with pytest.raises(SlugGenerationError):
            service.create_link(client)
        assert len(calls) == 3
        assert len(service.get_links_for_client(client.id)) == 1

    def test_collision_retries(self, links, plumber, monkeypatch):
        first = links.create_link(plumber)
        candidates = iter([first.slug, "joes-plumbing-zzzz"])
        monkeypatch.setattr(demo_link_service, 'generate_slug', lambda name: next(candidates))

        second = links.create_link(plumber)

        assert second.slug == "joes-plumbing-zzzz"


class TestValidity:
    """Test expiry and activity checks"""

    def test_expiry_boundary(self, links, plumber, clock):
        link = links.create_link(plumber, expires_in_days=1)

        assert links.is_valid(link) == True

        clock.advance(hours=23, minutes=59)
        assert links.is_valid(link) == True

        clock.advance(minutes=2)
        assert links.is_valid(link) == False
        assert links.check_link(link) == LinkStatus.EXPIRED

    def test_no_expiry_valid_indefinitely(self, links, plumber, clock):
        link = links.create_link(plumber, expires_in_days=None)

        clock.advance(days=3650)

        assert link.expires_at is None
        assert links.is_valid(link) == True

    def test_inactive(self, links, plumber):
        link = links.create_link(plumber, expires_in_days=7)

        deactivated = links.deactivate_link(link.id)

        assert deactivated.is_active == False
        assert links.check_link(deactivated) == LinkStatus.INACTIVE

    def test_expired_wins_over_inactive(self, links, plumber, clock):
        link = links.create_link(plumber, expires_in_days=1)
        link.is_active = False

        assert check_link(link, clock.advance(days=2)) == LinkStatus.EXPIRED

    def test_check_does_not_mutate(self, links, plumber, clock):
        link = links.create_link(plumber, expires_in_days=1)
        before = link.to_dict()

        check_link(link, clock.advance(days=5))

        assert link.to_dict() == before


class TestUsage:
    """Test usage counting"""

    def test_increment_five_times(self, links, plumber):
        link = links.create_link(plumber, expires_in_days=7, demo_phone_number="+15125550100")
        before = link.to_dict()

        for _ in range(5):
            links.increment_usage(link.slug)

        after = links.get_link(link.id).to_dict()
        assert after['usage_count'] == 5
        del before['usage_count'], after['usage_count']
        assert after == before

    def test_unknown_slug_does_not_raise(self, links):
        assert links.increment_usage("no-such-slug") is None

    def test_storage_failure_is_swallowed(self, links, plumber, monkeypatch):
        link = links.create_link(plumber)

        def broken(_link):
            raise OSError("disk full")

        monkeypatch.setattr(links.data_service, 'save_demo_link', broken)

        assert links.increment_usage(link.slug) is None


class TestResolveSlug:
    """Test opening demo links"""

    def test_valid_link_counts_view(self, links, lifecycle):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client, expires_in_days=7)

        resolution = links.resolve_slug(link.slug)

        assert resolution.ok
        assert resolution.client.id == client.id
        assert resolution.link.usage_count == 1
        assert resolution.message is None

    def test_not_found(self, links):
        resolution = links.resolve_slug("missing-abcd")

        assert resolution.status == LinkStatus.NOT_FOUND
        assert "not found" in resolution.message

    def test_expired_hides_client(self, links, lifecycle, clock):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client, expires_in_days=1)
        clock.advance(days=2)

        resolution = links.resolve_slug(link.slug)

        assert resolution.status == LinkStatus.EXPIRED
        assert resolution.client is None
        assert links.get_link(link.id).usage_count == 0

    def test_explicit_now(self, links, lifecycle, clock):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client, expires_in_days=1)

        later = links.resolve_slug(link.slug, now=clock() + timedelta(days=2))

        assert later.status == LinkStatus.EXPIRED
        assert links.resolve_slug(link.slug).ok

    def test_client_missing(self, links, lifecycle):
        client = lifecycle.create_client("Joe's Plumbing", "Plumbing", "Austin, TX")
        link = links.create_link(client)
        lifecycle.delete_client(client.id)

        resolution = links.resolve_slug(link.slug)

        assert resolution.status == LinkStatus.CLIENT_MISSING

    def test_links_for_client(self, links, plumber, clock):
        first = links.create_link(plumber)
        clock.advance(minutes=1)
        second = links.create_link(plumber)
        links.deactivate_link(first.id)

        assert [link.id for link in links.get_links_for_client(plumber.id)] == [first.id, second.id]
        assert [link.id for link in links.get_links_for_client(plumber.id, active_only=True)] == [second.id]
        assert links.delete_links_for_client(plumber.id) == 2
        assert links.get_links_for_client(plumber.id) == []
