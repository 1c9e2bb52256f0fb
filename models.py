import json
from dataclasses import dataclass, field
from typing import Any, Optional

HOST = "medium.com"
ENDPOINT = f"https://{HOST}"
TOP_PATH = "/browse/top"

# Guard prefix on every Medium JSON body
XSSI_PREFIX = "])}while(1);</x>"

# Last millisecond of year 9999, the largest instant datetime can represent
MAX_CREATED_AT = 253402300799999


class MalformedResponseError(ValueError):
    """Raised when a response body does not match the feed schema."""


_REQUIRED = object()


def _string_field(data: dict[str, Any], key: str, default: Any = _REQUIRED) -> Any:
    """Read a string field, using ``default`` when it is absent or null."""
    value = data.get(key)
    if value is None and default is not _REQUIRED:
        return default
    if not isinstance(value, str):
        raise MalformedResponseError(f"Field {key!r} must be a string, got {value!r}")
    return value


@dataclass
class Post:
    id: str
    title: str
    created_at: int
    creator_id: str
    unique_slug: str
    home_collection_id: str = ""
    subtitle: Optional[str] = None
    recommends: int = 0
    responses_count: int = 0

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Post":
        if not isinstance(data, dict):
            raise MalformedResponseError(f"Post entry is not an object: {data!r}")
        post_id = _string_field(data, "id")
        virtuals = data.get("virtuals") or {}
        content = data.get("content") or {}
        if not isinstance(virtuals, dict) or not isinstance(content, dict):
            raise MalformedResponseError(f"Post {post_id} has non-object virtuals or content")
        try:
            created_at = int(data.get("createdAt", 0))
            recommends = int(virtuals.get("recommends", virtuals.get("totalClapCount", 0)))
            responses_count = int(virtuals.get("responsesCreatedCount", 0))
        except (OverflowError, TypeError, ValueError) as e:
            raise MalformedResponseError(f"Post {post_id} has invalid counters: {e}") from e
        if not 0 <= created_at <= MAX_CREATED_AT:
            raise MalformedResponseError(f"Post {post_id} has out of range createdAt {created_at}")
        return cls(
            id=post_id,
            title=_string_field(data, "title"),
            created_at=created_at,
            creator_id=_string_field(data, "creatorId", ""),
            unique_slug=_string_field(data, "uniqueSlug", ""),
            home_collection_id=_string_field(data, "homeCollectionId", ""),
            subtitle=_string_field(content, "subtitle", None),
            recommends=recommends,
            responses_count=responses_count,
        )


@dataclass
class User:
    user_id: str
    name: str
    username: str

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "User":
        return cls(
            user_id=_string_field(data, "userId", ""),
            name=_string_field(data, "name", ""),
            username=_string_field(data, "username", ""),
        )


@dataclass
class Collection:
    id: str
    name: str
    domain: Optional[str] = None

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Collection":
        return cls(
            id=_string_field(data, "id", ""),
            name=_string_field(data, "name", ""),
            domain=_string_field(data, "domain", None),
        )


@dataclass
class MediumStory:
    post: Post
    user: Optional[User] = None
    collection: Optional[Collection] = None

    @property
    def url(self) -> str:
        if self.user and self.user.username and self.post.unique_slug:
            return f"{ENDPOINT}/@{self.user.username}/{self.post.unique_slug}"
        return f"{ENDPOINT}/p/{self.post.id}"

    @property
    def comments_url(self) -> str:
        return f"{self.url}#--responses"


@dataclass
class FeedResponse:
    posts: list[Post] = field(default_factory=list)
    users: dict[str, User] = field(default_factory=dict)
    collections: dict[str, Collection] = field(default_factory=dict)

    def stories(self) -> list[MediumStory]:
        """Join every post with its author and home collection, keeping feed order."""
        return [
            MediumStory(
                post=post,
                user=self.users.get(post.creator_id),
                collection=self.collections.get(post.home_collection_id),
            )
            for post in self.posts
        ]


def strip_xssi_prefix(text: str) -> str:
    stripped = text.lstrip()
    if stripped.startswith(XSSI_PREFIX):
        return stripped[len(XSSI_PREFIX):]
    return text


def decode_feed(text: str | bytes) -> FeedResponse:
    try:
        if isinstance(text, (bytes, bytearray)):
            text = text.decode("utf-8")
        document = json.loads(strip_xssi_prefix(text))
    except ValueError as e:
        raise MalformedResponseError(f"Invalid feed response body: {e}") from e

    if not isinstance(document, dict):
        raise MalformedResponseError("Feed response is not a JSON object")
    if document.get("success") is False:
        raise MalformedResponseError(f"Feed request was not successful: {document.get('error')}")

    payload = document.get("payload")
    references = payload.get("references") if isinstance(payload, dict) else None
    if not isinstance(references, dict) or not isinstance(references.get("Post"), dict):
        raise MalformedResponseError("Feed response has no payload.references.Post mapping")

    raw_users = references.get("User") or {}
    raw_collections = references.get("Collection") or {}
    if not isinstance(raw_users, dict) or not isinstance(raw_collections, dict):
        raise MalformedResponseError("Feed response User and Collection references must be objects")

    # Dict order follows the source document, so posts keep feed order
    posts = [Post.from_json(raw) for raw in references["Post"].values()]
    users = {
        user_id: User.from_json(raw) for user_id, raw in raw_users.items() if isinstance(raw, dict)
    }
    collections = {
        collection_id: Collection.from_json(raw)
        for collection_id, raw in raw_collections.items()
        if isinstance(raw, dict)
    }
    return FeedResponse(posts=posts, users=users, collections=collections)
