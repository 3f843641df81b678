"""Ghost post payload construction."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from ghostify.models import FrontMatter, PostStatus


def _iso_utc(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def resolve_published_at(front_matter: FrontMatter, now: datetime | None = None) -> str | None:
    """Return the ``published_at`` value for a post.

    * scheduled with a ``time`` -- that time, verbatim;
    * published -- *now* (default: the current time) in ISO-8601 UTC;
    * anything else -- ``None``, letting Ghost decide.
    """
    if front_matter.status is PostStatus.SCHEDULED and front_matter.time:
        return front_matter.time
    if front_matter.status is PostStatus.PUBLISHED:
        return _iso_utc(now or datetime.now(timezone.utc))
    return None


def build_post_payload(
    title: str,
    lexical: str,
    front_matter: FrontMatter,
    feature_image: str | None = None,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Build the ``POST /posts/`` request body.

    Parameters
    ----------
    title:
        Post title.
    lexical:
        Serialized Lexical document.
    front_matter:
        Status, visibility, featured flag, tags and scheduled time.
    feature_image:
        URL of the post's feature image, if any.
    now:
        Publication time for immediately published posts.

    Returns
    -------
    dict
        ``{"posts": [post]}``.  ``feature_image`` and ``tags`` are only
        present when set.
    """
    post: dict[str, Any] = {
        "title": title,
        "lexical": lexical,
        "status": front_matter.status.value,
        "featured": front_matter.featured,
        "visibility": front_matter.visibility.value,
        "published_at": resolve_published_at(front_matter, now),
    }
    if feature_image:
        post["feature_image"] = feature_image
    if front_matter.tags:
        post["tags"] = [{"name": tag} for tag in front_matter.tags]
    return {"posts": [post]}


def editor_url(ghost_url: str, post_id: str) -> str:
    """URL of *post_id* in the Ghost admin editor."""
    return f"{ghost_url.rstrip('/')}/ghost/#/editor/post/{post_id}"
