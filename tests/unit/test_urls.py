"""Tests for xiaoyuzhoufm.com URL helpers."""

from podbrief.ingestion.urls import episode_page_url, parse_podcast_url, podcast_page_url


class TestParsePodcastUrl:
    """Tests for parse_podcast_url function."""

    def test_standard_homepage(self):
        """Should extract the id from a podcast homepage URL."""
        url = "https://www.xiaoyuzhoufm.com/podcast/5e280fab418a84a0461fc579"
        assert parse_podcast_url(url) == "5e280fab418a84a0461fc579"

    def test_without_www_and_with_query(self):
        """Should ignore the host prefix and trailing query string."""
        url = "https://xiaoyuzhoufm.com/podcast/abc123?s=share"
        assert parse_podcast_url(url) == "abc123"

    def test_surrounding_whitespace(self):
        """Should tolerate pasted URLs with whitespace."""
        assert parse_podcast_url("  https://www.xiaoyuzhoufm.com/podcast/abc123 \n") == "abc123"

    def test_episode_url_is_not_a_podcast(self):
        """Should return None for episode pages."""
        assert parse_podcast_url("https://www.xiaoyuzhoufm.com/episode/abc123") is None

    def test_other_site(self):
        """Should return None for other platforms."""
        assert parse_podcast_url("https://www.youtube.com/podcast/abc123") is None

    def test_empty(self):
        """Should return None for empty input."""
        assert parse_podcast_url("") is None


class TestPageUrls:
    """Tests for page URL builders."""

    def test_podcast_page_url(self):
        assert podcast_page_url("abc") == "https://www.xiaoyuzhoufm.com/podcast/abc"

    def test_episode_page_url(self):
        assert episode_page_url("e1") == "https://www.xiaoyuzhoufm.com/episode/e1"
