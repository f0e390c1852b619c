from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.logger import log_event
from templates.post_body import FILENAME_TEMPLATE, PLACEHOLDER_BODY, TIMESTAMP_FORMAT
from utils.file_handler import save_post, slugify
from utils.front_matter import render_front_matter


def build_front_matter(
    title: str,
    authors: List[str],
    published: Optional[datetime] = None,
    categories: Optional[List[str]] = None,
    comments: Optional[bool] = None,
    layout: str = "post",
) -> dict:
    """
    Front matter for a new post. A single author uses the `author` shorthand.
    """
    if not title or not title.strip():
        raise ValueError("title must not be blank")
    authors = [a.strip() for a in authors or [] if a and a.strip()]
    if not authors:
        raise ValueError("at least one author is required")

    data = {"layout": layout, "title": title.strip()}
    if len(authors) == 1:
        data["author"] = authors[0]
    else:
        data["authors"] = authors

    # naive datetimes are taken as local time
    published = published or datetime.now()
    if published.tzinfo is None:
        published = published.astimezone()
    data["date"] = published.strftime(TIMESTAMP_FORMAT)

    if categories:
        tokens = [c.strip() for c in categories if c and c.strip()]
        for token in tokens:
            if len(token.split()) > 1:
                raise ValueError(f"category '{token}' must be a single token")
        if tokens:
            data["categories"] = " ".join(tokens)
    if comments is not None:
        data["comments"] = comments
    return data


def new_post(
    posts_dir,
    title: str,
    authors: List[str],
    published: Optional[datetime] = None,
    categories: Optional[List[str]] = None,
    comments: Optional[bool] = None,
    layout: str = "post",
) -> Path:
    front_matter = build_front_matter(title, authors, published, categories, comments, layout)
    slug = slugify(title)
    if not slug:
        raise ValueError(f"cannot derive a filename slug from title '{title}'")

    post_date = front_matter["date"].split(" ")[0]
    filename = FILENAME_TEMPLATE.format(date=post_date, slug=slug)
    text = render_front_matter(front_matter) + "\n" + PLACEHOLDER_BODY

    path = save_post(Path(posts_dir) / filename, text)
    log_event("SUCCESS", "Post created", {"path": str(path), "title": front_matter["title"]})
    return path
