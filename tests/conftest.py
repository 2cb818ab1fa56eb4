"""
ContentDB Test Suite — Shared fixtures and configuration.

Run:  pytest tests/ -v
"""

from __future__ import annotations

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest


# ---------------------------------------------------------------------------
# Global state — every test starts with empty registries and default config
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate_state():
    """Reset global singletons between tests."""
    import contentdb.engine.callbacks as cb_mod
    import contentdb.engine.config as cfg_mod
    from contentdb.engine.logging import shutdown_logging
    from contentdb.engine.registry import model_registry
    from contentdb.engine.repository import set_repository

    cfg_mod._store_config = cfg_mod.StoreConfig()
    cb_mod._callback_registry = None
    model_registry.clear()
    set_repository(None)
    shutdown_logging()

    yield

    cfg_mod._store_config = None
    cb_mod._callback_registry = None
    model_registry.clear()
    set_repository(None)
    shutdown_logging()
    logging.getLogger("contentdb").setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Site trees
# ---------------------------------------------------------------------------

POSTS = {
    "2024-01-01-first.md": "---\ntitle: First\ndate: 2024-01-01\n---\n\nHello first.\n",
    "2024-02-01-second.md": "---\ntitle: Second\ndate: 2024-02-01\ntags:\n- news\n---\n\nHello second.\n",
    "2024-03-01-third.md": "---\ntitle: Third\ndate: 2024-03-01\ncustom_flag: true\n---\n\nHello third.\n",
}

LINKS_YAML = (
    "- name: Home\n"
    "  url: https://example.com\n"
    "- name: Blog\n"
    "  url: https://example.com/blog\n"
)

AUTHORS_YAML = (
    "alice:\n"
    "  name: Alice\n"
    "  email: alice@example.com\n"
    "bob:\n"
    "  name: Bob\n"
)


@pytest.fixture
def site(tmp_path) -> Path:
    """
    Create a small static site tree.

        site/
          about.md
          _drafts/idea.md
          _posts/2024-0{1,2,3}-01-*.md
          _data/links.yml      (sequence root)
          _data/authors.yml    (mapping root)
    """
    root = tmp_path / "site"
    posts = root / "_posts"
    posts.mkdir(parents=True)
    for name, text in POSTS.items():
        (posts / name).write_text(text, encoding="utf-8")

    (root / "about.md").write_text("---\ntitle: About\n---\n\nAbout us.\n", encoding="utf-8")
    (root / "_drafts").mkdir()
    (root / "_drafts" / "idea.md").write_text("---\ntitle: Idea\n---\n\nLater.\n", encoding="utf-8")

    data = root / "_data"
    data.mkdir()
    (data / "links.yml").write_text(LINKS_YAML, encoding="utf-8")
    (data / "authors.yml").write_text(AUTHORS_YAML, encoding="utf-8")
    return root


@pytest.fixture
def post_model(site):
    """A content model over site/_posts."""
    from contentdb.decorators import content_model
    from contentdb.models import ContentModel

    @content_model(base_path=str(site), folder="_posts", variables=["title", "date", "tags"])
    class Post(ContentModel):
        pass

    return Post


@pytest.fixture
def link_model(site):
    """A datafile model over site/_data."""
    from contentdb.decorators import datafile_model
    from contentdb.models import DatafileModel

    @datafile_model(base_path=str(site), folder="_data", variables=["name", "url", "email"])
    class Link(DatafileModel):
        pass

    return Link


@pytest.fixture
def mock_repository():
    """Install a mock repository notifier."""
    from contentdb.engine.repository import set_repository

    repo = MagicMock()
    set_repository(repo)
    return repo
