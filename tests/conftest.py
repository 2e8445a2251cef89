"""Shared fixtures for podbrief tests."""

import json
import os
import tempfile
from unittest.mock import Mock

import pytest

# Module-level loggers open their files at import time
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="podbrief-test-logs-"))

from podbrief.config import Settings  # noqa: E402
from podbrief.db import Platform, configure_database, init_database, register_creator  # noqa: E402
from podbrief.db import upsert_episode  # noqa: E402


PODCAST_ID = "5e280fab418a84a0461fc579"

SHOWNOTES = (
    "<p>本期我们聊了播客行业的现状与未来。</p>"
    "<p>从内容创作、商业化到听众增长，嘉宾分享了自己做独立播客五年来的经验，"
    "也讨论了平台算法推荐对小众节目的影响，以及如何在信息过载的时代保持创作节奏。</p>"
    "<p>时间轴：00:00 开场；05:30 入行经历；20:15 商业化；41:00 听众与社区。</p>"
)


def render_next_data_page(page_props: dict, og: dict = None) -> str:
    """HTML page carrying page_props in __NEXT_DATA__ (plus optional og tags)."""
    meta = "".join(
        f'<meta property="og:{key}" content="{value}">' for key, value in (og or {}).items()
    )
    payload = json.dumps({"props": {"pageProps": page_props}}, ensure_ascii=False)
    return (
        f"<html><head>{meta}</head><body><div id='__next'></div>"
        f'<script id="__NEXT_DATA__" type="application/json">{payload}</script>'
        "</body></html>"
    )


def raw_episode(eid: str, title: str = None, **extra) -> dict:
    episode = {
        "eid": eid,
        "title": title or f"Episode {eid}",
        "duration": 3725,
        "pubDate": "2024-05-01T08:00:00.000Z",
        "enclosure": {"url": f"https://media.example.com/{eid}.m4a"},
        "image": {"picUrl": f"https://image.example.com/{eid}.jpg"},
    }
    episode.update(extra)
    return episode


@pytest.fixture
def podcast_page_html():
    """Podcast homepage with metadata and 4 episodes under pageProps.episodes."""
    return render_next_data_page(
        {
            "podcast": {
                "pid": PODCAST_ID,
                "title": "声东击西",
                "description": "一档关于科技与文化的播客",
                "image": {"picUrl": "https://image.example.com/podcast.jpg"},
            },
            "episodes": [raw_episode(f"ep{i}") for i in range(1, 5)],
        }
    )


@pytest.fixture
def meta_only_html():
    """Podcast homepage without a structured payload."""
    return (
        "<html><head>"
        '<meta property="og:title" content="Meta Podcast">'
        '<meta property="og:description" content="Described by og tags">'
        '<meta property="og:image" content="https://image.example.com/og.jpg">'
        "</head><body></body></html>"
    )


@pytest.fixture
def episode_page_html():
    """Episode page whose shownotes are long enough to serve as transcript."""
    return render_next_data_page({"episode": {"eid": "ep1", "shownotes": SHOWNOTES}})


@pytest.fixture
def settings():
    return Settings(ai_api_key="test-key", ai_model="test-model")


@pytest.fixture
def db(tmp_path):
    """Fresh SQLite database with all tables created."""
    engine = configure_database(f"sqlite:///{tmp_path / 'podbrief.db'}")
    init_database()
    yield engine
    engine.dispose()


@pytest.fixture
def creator_id(db):
    creator_id, _ = register_creator(
        platform=Platform.XIAOYUZHOU,
        platform_id=PODCAST_ID,
        homepage_url=f"https://www.xiaoyuzhoufm.com/podcast/{PODCAST_ID}",
        name="声东击西",
    )
    return creator_id


@pytest.fixture
def episode_id(creator_id):
    return upsert_episode(
        creator_id=creator_id,
        platform_episode_id="ep1",
        title="播客行业的未来",
        original_url="https://www.xiaoyuzhoufm.com/episode/ep1",
        duration=3600,
        audio_url="https://media.example.com/ep1.m4a",
    )


def completion(content: str) -> Mock:
    """Chat completion response object with a single choice."""
    return Mock(choices=[Mock(message=Mock(content=content))])


@pytest.fixture
def ai_reply():
    return json.dumps(
        {
            "summary": "嘉宾分享了独立播客的创作与商业化经验。",
            "key_points": ["坚持更新", "重视社区", "多元变现"],
            "keywords": ["播客", "商业化", "社区"],
            "timestamps": [
                {"time": 0, "topic": "开场介绍", "summary": "主持人介绍嘉宾"},
                {"time": 330, "topic": "入行经历", "summary": "嘉宾如何开始做播客"},
                {"time": 1215, "topic": "商业化", "summary": "广告与会员"},
            ],
        },
        ensure_ascii=False,
    )


@pytest.fixture
def llm_client(ai_reply):
    """OpenAI client double answering every request with ai_reply."""
    client = Mock()
    client.chat.completions.create.return_value = completion(
        f"好的，以下是摘要：\n```json\n{ai_reply}\n```"
    )
    return client


@pytest.fixture
def make_page():
    return render_next_data_page


@pytest.fixture
def make_raw_episode():
    return raw_episode


@pytest.fixture
def make_completion():
    return completion


@pytest.fixture
def site(podcast_page_html, episode_page_html):
    """Fetcher double serving the podcast homepage and every episode page."""

    def fetch(url, timeout=30):
        if "/podcast/" in url:
            return podcast_page_html
        return episode_page_html

    return Mock(side_effect=fetch)
