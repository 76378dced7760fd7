"""
Tests for CDN image fetching.
"""

import asyncio

import pytest

from rescuedogs_mcp.client.images import build_transform_url
from rescuedogs_mcp.core.models import ImageContent, ImagePreset
from tests.fakes import IMAGE_BASE, JPEG_B64, FakeResponse, image

BUDDY = "https://images.rescuedogs.me/dogs/buddy.jpg"
BUDDY_THUMB = "/cdn-cgi/image/w=200,h=200,fit=cover,q=70,f=jpeg/dogs/buddy.jpg"
LUNA = "https://cdn.rescuedogs.me/dogs/luna.jpg"
LUNA_THUMB = "/cdn-cgi/image/w=200,h=200,fit=cover,q=70,f=jpeg/dogs/luna.jpg"


class TestBuildTransformUrl:
    """Tests for build_transform_url."""

    def test_cdn_url_rewritten(self):
        """Test that CDN-hosted images use the resize endpoint."""
        url = build_transform_url(BUDDY, ImagePreset.THUMBNAIL, IMAGE_BASE)

        assert url == IMAGE_BASE + BUDDY_THUMB

    def test_medium_preset(self):
        """Test the medium transform."""
        url = build_transform_url(BUDDY, ImagePreset.MEDIUM, IMAGE_BASE)

        assert "/cdn-cgi/image/w=400,h=400,fit=cover,q=75,f=jpeg/dogs/buddy.jpg" in url

    def test_subdomain_rewritten(self):
        """Test that any subdomain of the CDN domain is rewritten."""
        url = build_transform_url(LUNA, ImagePreset.THUMBNAIL, IMAGE_BASE)

        assert url == IMAGE_BASE + LUNA_THUMB

    def test_external_url_unchanged(self):
        """Test that images hosted elsewhere are fetched as-is."""
        external = "https://rescue.example.org/photos/rex.jpg"

        assert build_transform_url(external, ImagePreset.THUMBNAIL, IMAGE_BASE) == external

    def test_lookalike_domain_unchanged(self):
        """Test that a host merely ending in the domain name is not rewritten."""
        lookalike = "https://notrescuedogs.me/dog.jpg"

        assert build_transform_url(lookalike, ImagePreset.THUMBNAIL, IMAGE_BASE) == lookalike


class TestFetchDogImage:
    """Tests for ImageClient.fetch_dog_image."""

    @pytest.mark.asyncio
    async def test_fetch_encodes_base64(self, image_client, session):
        """Test that a fetched image is returned base64-encoded."""
        session.add("GET", BUDDY_THUMB, image())

        result = await image_client.fetch_dog_image(BUDDY)

        assert result == ImageContent(data=JPEG_B64, mime_type="image/jpeg")
        assert session.calls[0]["headers"]["Accept"].startswith("image/")
        assert session.calls[0]["timeout"].total == 5.0

    @pytest.mark.asyncio
    async def test_no_url(self, image_client, session):
        """Test that a missing URL yields None without a request."""
        assert await image_client.fetch_dog_image(None) is None
        assert await image_client.fetch_dog_image("") is None
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_relative_url(self, image_client, session):
        """Test that a URL without scheme and host yields None without a request."""
        session.add("GET", "/dogs/a.jpg", image())

        assert await image_client.fetch_dog_image("/dogs/a.jpg") is None
        assert session.calls == []

    @pytest.mark.asyncio
    async def test_cache_hit(self, image_client, session, cache):
        """Test that a second fetch is served from the cache."""
        session.add("GET", BUDDY_THUMB, image())

        first = await image_client.fetch_dog_image(BUDDY)
        second = await image_client.fetch_dog_image(BUDDY)

        assert first == second
        assert len(session.calls) == 1
        assert cache.get_image(BUDDY, "thumbnail") == JPEG_B64

    @pytest.mark.asyncio
    async def test_presets_cached_separately(self, image_client, session):
        """Test that each preset is fetched and cached on its own."""
        session.add("GET", BUDDY_THUMB, image())
        session.add("GET", "/cdn-cgi/image/w=400,h=400,fit=cover,q=75,f=jpeg/dogs/buddy.jpg", image())

        await image_client.fetch_dog_image(BUDDY, ImagePreset.THUMBNAIL)
        await image_client.fetch_dog_image(BUDDY, ImagePreset.MEDIUM)

        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_failure_returns_none(self, image_client, session, cache):
        """Test that a failed fetch degrades to None and is not cached."""
        session.add("GET", BUDDY_THUMB, FakeResponse(404))

        assert await image_client.fetch_dog_image(BUDDY) is None
        assert not cache.has(f"image:{BUDDY}:thumbnail")

    @pytest.mark.asyncio
    async def test_timeout_retried_then_none(self, image_client, session):
        """Test that a timing-out image is retried once, then dropped."""
        session.add("GET", BUDDY_THUMB, asyncio.TimeoutError())

        assert await image_client.fetch_dog_image(BUDDY) is None
        assert len(session.calls) == 2

    @pytest.mark.asyncio
    async def test_external_fetched_directly(self, image_client, session):
        """Test that a non-CDN image is requested at its own URL."""
        session.add("GET", "/photos/rex.jpg", image())

        result = await image_client.fetch_dog_image("https://rescue.example.org/photos/rex.jpg")

        assert result is not None
        assert session.calls[0]["url"] == "https://rescue.example.org/photos/rex.jpg"


class TestFetchDogImages:
    """Tests for ImageClient.fetch_dog_images."""

    @pytest.mark.asyncio
    async def test_batch_keeps_positions(self, image_client, session):
        """Test that the result has one entry per input, in order."""
        session.add("GET", BUDDY_THUMB, image())

        results = await image_client.fetch_dog_images([BUDDY, None, LUNA])

        assert len(results) == 3
        assert results[0] is not None
        assert results[1] is None
        # LUNA has no route, so it fails
        assert results[2] is None

    @pytest.mark.asyncio
    async def test_batch_with_missing_urls(self, image_client, session):
        """Test a batch where only the first dog has a photo."""
        session.add("GET", BUDDY_THUMB, image())

        results = await image_client.fetch_dog_images([BUDDY, None, None])

        assert len(results) == 3
        assert results[1:] == [None, None]

    @pytest.mark.asyncio
    async def test_empty_batch(self, image_client):
        """Test that an empty batch returns an empty list."""
        assert await image_client.fetch_dog_images([]) == []
