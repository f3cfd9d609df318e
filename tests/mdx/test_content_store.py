"""Tests for locating and loading article files."""

import pytest

from mdx import ContentStore, FrontmatterError, estimate_reading_time

ARTICLE = """---
title: Speech Recognition
description: How ASR works
related:
  - infrastructure/telephony
---

## Overview

<Callout type="info">
Streaming ASR returns partial results.
</Callout>

### Accuracy
"""


@pytest.fixture
def content_dir(tmp_path):
    (tmp_path / "foundations").mkdir()
    (tmp_path / "foundations" / "index.mdx").write_text("# Foundations\n", encoding="utf-8")
    (tmp_path / "foundations" / "speech-recognition.mdx").write_text(ARTICLE, encoding="utf-8")
    (tmp_path / "infrastructure").mkdir()
    (tmp_path / "infrastructure" / "telephony.md").write_text("Plain markdown\n", encoding="utf-8")
    return tmp_path


class TestEstimateReadingTime:
    """Tests for estimate_reading_time()."""

    def test_minimum_one_minute(self) -> None:
        assert estimate_reading_time("") == "1 min read"

    def test_rounds_up(self) -> None:
        assert estimate_reading_time("word " * 401) == "3 min read"


class TestFind:
    """Tests for ContentStore.find()."""

    def test_file_named_after_slug(self, content_dir) -> None:
        store = ContentStore(content_dir)
        path = store.find(["foundations", "speech-recognition"])
        assert path == content_dir / "foundations" / "speech-recognition.mdx"

    def test_directory_index(self, content_dir) -> None:
        store = ContentStore(content_dir)
        assert store.find(["foundations"]) == content_dir / "foundations" / "index.mdx"

    def test_markdown_extension(self, content_dir) -> None:
        store = ContentStore(content_dir)
        assert store.find(["infrastructure", "telephony"]).suffix == ".md"

    def test_file_wins_over_index(self, content_dir) -> None:
        (content_dir / "foundations.mdx").write_text("top", encoding="utf-8")
        store = ContentStore(content_dir)
        assert store.find(["foundations"]) == content_dir / "foundations.mdx"

    @pytest.mark.parametrize("slug_path", [[], [".."], ["foundations", ".."], ["a/b"]])
    def test_rejects_unsafe_paths(self, content_dir, slug_path) -> None:
        assert ContentStore(content_dir).find(slug_path) is None

    def test_missing(self, content_dir) -> None:
        assert ContentStore(content_dir).find(["foundations", "text-to-speech"]) is None


class TestLoad:
    """Tests for ContentStore.load()."""

    def test_loads_article(self, content_dir, index) -> None:
        article = ContentStore(content_dir, index).load(["foundations", "speech-recognition"])
        assert article is not None
        assert article.frontmatter.title == "Speech Recognition"
        assert article.frontmatter.related == ["infrastructure/telephony"]
        assert "callout-info" in article.html
        assert '<h2 id="overview">' in article.html
        assert [item.text for item in article.table_of_contents] == ["Overview", "Accuracy"]
        assert article.reading_time == "1 min read"
        assert not article.body.startswith("---")

    def test_missing_file_returns_none(self, content_dir) -> None:
        assert ContentStore(content_dir).load(["infrastructure", "webrtc"]) is None

    def test_bad_frontmatter_raises(self, content_dir) -> None:
        (content_dir / "broken.mdx").write_text("---\ntitle: [oops\n---\n", encoding="utf-8")
        with pytest.raises(FrontmatterError):
            ContentStore(content_dir).load(["broken"])

    def test_root_property(self, content_dir) -> None:
        assert ContentStore(str(content_dir)).root == content_dir
