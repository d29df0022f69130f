"""
Shared fixtures: a handful of articles and models built from them.
"""

import pytest

from ptlk.api import Article, FetchResult
from ptlk.model import ListModel, RuntimeState

SITE_URL = "http://localhost:3000"


def make_article(n, **overrides):
    fields = {
        "title": f"Article {n}",
        "url": f"https://example.com/{n}",
        "summary": f"Summary {n}",
        "tag": "Tech",
        "source": f"Source {n}",
        "published_at": f"2024-01-0{n}T00:00:00Z",
    }
    fields.update(overrides)
    return Article(**fields)


@pytest.fixture
def articles():
    return [make_article(1), make_article(2, tag="AI")]


@pytest.fixture
def model(articles):
    model = ListModel()
    model.load(FetchResult(articles=articles))
    return model


@pytest.fixture
def state(model):
    return RuntimeState(model=model)
