import json
import os
import sys

import pytest


# Ensure project root is on sys.path so tests can import `main` and `models`
PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from models import XSSI_PREFIX  # noqa: E402


def build_feed_body(post_count, prefix=True, **overrides):
    posts = {}
    users = {}
    for i in range(post_count):
        posts[f"p{i}"] = {
            "id": f"p{i}",
            "title": f"Story {i}",
            "createdAt": 1500000000000 + i,
            "creatorId": f"u{i}",
            "homeCollectionId": "c1" if i % 2 == 0 else "",
            "uniqueSlug": f"story-{i}-abc",
            "content": {"subtitle": f"Subtitle {i}"},
            "virtuals": {"recommends": i * 10, "responsesCreatedCount": i},
            **overrides,
        }
        users[f"u{i}"] = {"userId": f"u{i}", "name": f"Writer {i}", "username": f"writer{i}"}
    document = {
        "success": True,
        "payload": {
            "references": {
                "Post": posts,
                "User": users,
                "Collection": {"c1": {"id": "c1", "name": "Pub", "domain": "pub.example"}},
            }
        },
    }
    body = json.dumps(document)
    return XSSI_PREFIX + body if prefix else body


@pytest.fixture
def feed_body():
    """Builds a Medium top stories body with the given number of posts."""
    return build_feed_body
