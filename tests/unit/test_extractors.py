"""Tests for podcast page extraction and episode normalization."""

from datetime import datetime

import pytest
from bs4 import BeautifulSoup

from podbrief.ingestion.extractors import (
    MetaTagExtractor,
    StructuredJsonExtractor,
    extract_episode_notes,
    extract_podcast_page,
    html_to_text,
)
from podbrief.ingestion.models import normalize_episode, parse_published_at, utc_now


PODCAST_ID = "5e280fab418a84a0461fc579"


class TestExtractPodcastPage:
    """Tests for extract_podcast_page function."""

    def test_structured_payload(self, podcast_page_html):
        """Should read metadata and episodes from __NEXT_DATA__."""
        page = extract_podcast_page(podcast_page_html, PODCAST_ID)

        assert page.podcast.id == PODCAST_ID
        assert page.podcast.name == "声东击西"
        assert page.podcast.description == "一档关于科技与文化的播客"
        assert page.podcast.avatar == "https://image.example.com/podcast.jpg"

    def test_episodes_capped_to_three_in_source_order(self, podcast_page_html):
        """Should keep only the 3 most recent episodes, in page order."""
        page = extract_podcast_page(podcast_page_html, PODCAST_ID)
        assert [episode.id for episode in page.episodes] == ["ep1", "ep2", "ep3"]

    def test_custom_episode_cap(self, podcast_page_html):
        page = extract_podcast_page(podcast_page_html, PODCAST_ID, max_episodes=1)
        assert len(page.episodes) == 1

    def test_episodes_nested_under_podcast(self, make_page, make_raw_episode):
        """Should find episodes under pageProps.podcast.episodes too."""
        html = make_page(
            {
                "podcast": {
                    "title": "Nested",
                    "episodes": [make_raw_episode("n1"), make_raw_episode("n2")],
                }
            }
        )
        page = extract_podcast_page(html, PODCAST_ID)

        assert page.podcast.name == "Nested"
        assert [episode.id for episode in page.episodes] == ["n1", "n2"]

    def test_podcast_without_title_gets_synthesized_name(self, make_page):
        page = extract_podcast_page(make_page({"podcast": {}}), "abc123")
        assert page.podcast.name == "播客 abc123"

    def test_meta_tags_only(self, meta_only_html):
        """Should fall back to og tags and return no episodes."""
        page = extract_podcast_page(meta_only_html, PODCAST_ID)

        assert page.podcast.name == "Meta Podcast"
        assert page.podcast.description == "Described by og tags"
        assert page.podcast.avatar == "https://image.example.com/og.jpg"
        assert page.episodes == []

    def test_payload_without_podcast_uses_meta_metadata(self, make_page, make_raw_episode):
        """Metadata and episodes are resolved independently."""
        html = make_page(
            {"episodes": [make_raw_episode("x1")]}, og={"title": "From OG"}
        )
        page = extract_podcast_page(html, PODCAST_ID)

        assert page.podcast.name == "From OG"
        assert [episode.id for episode in page.episodes] == ["x1"]

    def test_malformed_payload_falls_back(self):
        """Should not raise on invalid embedded JSON."""
        html = (
            '<html><head><meta property="og:title" content="Still Works"></head>'
            '<body><script id="__NEXT_DATA__">{not json</script></body></html>'
        )
        page = extract_podcast_page(html, PODCAST_ID)

        assert page.podcast.name == "Still Works"
        assert page.episodes == []

    def test_empty_page(self):
        """Should synthesize a name when nothing can be extracted."""
        page = extract_podcast_page("<html></html>", "abc123")

        assert page.podcast.name == "播客 abc123"
        assert page.podcast.description == ""
        assert page.episodes == []

    def test_entries_without_eid_are_skipped(self, make_page, make_raw_episode):
        html = make_page(
            {"podcast": {"title": "P"}, "episodes": [{"title": "no id"}, make_raw_episode("ok")]}
        )
        page = extract_podcast_page(html, PODCAST_ID)
        assert [episode.id for episode in page.episodes] == ["ok"]

    def test_overflowing_duration_defaults_to_zero(self, make_page, make_raw_episode):
        html = make_page({"podcast": {"title": "P"}, "episodes": [make_raw_episode("e1", duration=1e400)]})
        page = extract_podcast_page(html, PODCAST_ID)
        assert [(episode.id, episode.duration) for episode in page.episodes] == [("e1", 0)]


class TestExtractorStrategies:
    """Tests for the individual extraction strategies."""

    def test_structured_extractor_ignores_pages_without_payload(self, meta_only_html):
        soup = BeautifulSoup(meta_only_html, "html.parser")
        assert StructuredJsonExtractor().load(soup) is None

    def test_meta_extractor_has_no_episode_list(self, meta_only_html):
        extractor = MetaTagExtractor()
        data = extractor.load(BeautifulSoup(meta_only_html, "html.parser"))
        assert extractor.extract_episode_list(data) == []


class TestExtractEpisodeNotes:
    """Tests for extract_episode_notes function."""

    def test_shownotes_as_plain_text(self, make_page):
        html = make_page({"episode": {"shownotes": "<p>First</p><p>Second</p>"}})
        assert extract_episode_notes(html) == "First\nSecond"

    def test_description_fallback(self, make_page):
        html = make_page({"episode": {"description": "Only a description"}})
        assert extract_episode_notes(html) == "Only a description"

    def test_og_description_fallback(self, meta_only_html):
        assert extract_episode_notes(meta_only_html) == "Described by og tags"

    def test_nothing_found(self):
        assert extract_episode_notes("<html><body>hi</body></html>") == ""

    def test_html_to_text_empty(self):
        assert html_to_text("") == ""


class TestNormalizeEpisode:
    """Tests for normalize_episode function."""

    def test_full_entry(self, make_raw_episode):
        episode = normalize_episode(make_raw_episode("ep1", title="Hello"))

        assert episode.id == "ep1"
        assert episode.title == "Hello"
        assert episode.duration == 3725
        assert episode.published_at == datetime(2024, 5, 1, 8, 0, 0)
        assert episode.audio_url == "https://media.example.com/ep1.m4a"
        assert episode.thumbnail_url == "https://image.example.com/ep1.jpg"

    def test_defaults(self):
        """Missing fields get duration 0, current time and empty URLs."""
        before = utc_now().replace(microsecond=0)
        episode = normalize_episode({"eid": "e", "title": "T"}, fallback_thumbnail="")

        assert episode.duration == 0
        assert episode.published_at >= before
        assert episode.audio_url == ""
        assert episode.thumbnail_url == ""

    def test_media_source_audio_fallback(self):
        raw = {"eid": "e", "title": "T", "media": {"source": {"url": "https://m/a.mp3"}}}
        assert normalize_episode(raw).audio_url == "https://m/a.mp3"

    def test_podcast_avatar_thumbnail_fallback(self):
        episode = normalize_episode({"eid": "e", "title": "T"}, fallback_thumbnail="https://p.jpg")
        assert episode.thumbnail_url == "https://p.jpg"

    def test_small_pic_thumbnail(self):
        raw = {"eid": "e", "title": "T", "image": {"smallPicUrl": "https://s.jpg"}}
        assert normalize_episode(raw).thumbnail_url == "https://s.jpg"

    @pytest.mark.parametrize("raw", [{}, {"title": "no id"}, "not a dict"])
    def test_invalid_entries(self, raw):
        assert normalize_episode(raw) is None

    def test_invalid_duration(self):
        assert normalize_episode({"eid": "e", "title": "T", "duration": "long"}).duration == 0

    def test_overflowing_duration(self):
        assert normalize_episode({"eid": "e", "title": "T", "duration": 1e400}).duration == 0


class TestParsePublishedAt:
    """Tests for parse_published_at function."""

    def test_utc_z_suffix(self):
        assert parse_published_at("2024-05-01T08:00:00.000Z") == datetime(2024, 5, 1, 8, 0)

    def test_offset_converted_to_utc(self):
        assert parse_published_at("2024-05-01T16:00:00+08:00") == datetime(2024, 5, 1, 8, 0)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_unparseable(self, value):
        assert parse_published_at(value) is None
