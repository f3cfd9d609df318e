"""Shared fixtures: a small taxonomy exercising ordering, nesting and orphans."""

import pytest

from taxonomy import Category, TaxonomyIndex


def make_category(id, slug=None, parent_id=None, order=0, **kwargs) -> Category:
    return Category(
        id=id,
        title=kwargs.pop("title", id.replace("-", " ").title()),
        slug=slug or id,
        parent_id=parent_id,
        order=order,
        **kwargs,
    )


@pytest.fixture
def categories() -> list[Category]:
    """Source order deliberately differs from sibling order."""
    return [
        make_category("infrastructure", order=2, icon="server",
                      description="Running voice agents in production"),
        make_category("foundations", order=1, icon="layers",
                      description="Core concepts"),
        make_category("text-to-speech", parent_id="foundations", order=2,
                      title="Text to Speech", tags=["tts", "synthesis"],
                      description="Neural voice synthesis"),
        make_category("speech-recognition", parent_id="foundations", order=1,
                      title="Speech Recognition", tags=["asr", "stt"],
                      description="Audio to text"),
        make_category("asr-streaming", slug="streaming", parent_id="speech-recognition",
                      order=1, title="Streaming ASR", tags=["streaming", "latency"],
                      description="Partial results for live audio"),
        make_category("telephony", parent_id="infrastructure", order=1,
                      tags=["sip", "speech-recognition"],
                      description="SIP trunks and call control"),
    ]


@pytest.fixture
def index(categories) -> TaxonomyIndex:
    return TaxonomyIndex(categories)


@pytest.fixture(name="make_category")
def make_category_fixture():
    """Factory for ad-hoc categories inside a test."""
    return make_category
