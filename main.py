import logging
import math
import os
from datetime import datetime, timedelta, timezone

import requests
from dotenv import load_dotenv

from medium_service import DEFAULT_TIMEOUT, MediumService
from models import MediumStory

# Setup
logging.basicConfig(level=logging.INFO)
load_dotenv()

# Parameters
DEFAULT_MAX_STORIES = 10
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def format_story(story: MediumStory) -> str:
    post = story.post
    published = EPOCH + timedelta(milliseconds=post.created_at)
    author = story.user.name if story.user else "unknown"
    line = f"{post.title} - {author}"
    if story.collection:
        line += f" in {story.collection.name}"
        if story.collection.domain:
            line += f" ({story.collection.domain})"
    line += f" ({post.recommends} recommends, {post.responses_count} responses, {published:%Y-%m-%d})"
    if post.subtitle:
        line += f"\n  {post.subtitle}"
    return f"{line}\n  {story.url}"


def load_config() -> tuple[int, tuple[float, float]] | None:
    try:
        max_stories = int(os.getenv("MEDIUM_MAX_STORIES", DEFAULT_MAX_STORIES))
        timeout = (
            float(os.getenv("MEDIUM_CONNECT_TIMEOUT", DEFAULT_TIMEOUT[0])),
            float(os.getenv("MEDIUM_READ_TIMEOUT", DEFAULT_TIMEOUT[1])),
        )
    except ValueError as e:
        logging.error(f"Invalid configuration: {e}")
        return None
    if max_stories < 1:
        logging.error(f"Invalid configuration: MEDIUM_MAX_STORIES must be positive, got {max_stories}")
        return None
    if not all(math.isfinite(value) and value > 0 for value in timeout):
        logging.error(f"Invalid configuration: timeouts must be finite and positive, got {timeout}")
        return None
    return max_stories, timeout


def main():
    config = load_config()
    if not config:
        return
    max_stories, timeout = config

    service = MediumService(timeout=timeout)
    try:
        feed = service.top().execute()
    except requests.exceptions.RequestException as e:
        logging.error(f"Failed to fetch top stories: {e}")
        return
    except ValueError as e:
        logging.error(f"Failed to decode top stories: {e}")
        return

    stories = feed.stories()
    if not stories:
        logging.info("No top stories")
        return

    logging.info(f"{len(stories)} top stories found, showing {min(len(stories), max_stories)}")
    for index, story in enumerate(stories[:max_stories], start=1):
        logging.info(f"{index}. {format_story(story)}")


if __name__ == "__main__":
    main()
