import re
from datetime import date
from pathlib import Path
from typing import Iterable, List, Tuple

from models.post import Post
from utils.front_matter import split_front_matter

POST_FILENAME = re.compile(r"^(?P<date>\d{4}-\d{2}-\d{2})-(?P<slug>[^/\\]+)$")


def slugify(title: str) -> str:
    safe_title = "".join(c for c in title.lower() if c.isalnum() or c in (" ", "-", "_"))
    slug = re.sub(r"[\s_]+", "-", safe_title.strip())
    return re.sub(r"-{2,}", "-", slug).strip("-")[:80]


def find_posts(posts_dir, extensions: Iterable[str]) -> List[Path]:
    """
    Collect post files below the posts directory, sorted by path.
    """
    path = Path(posts_dir)
    if not path.is_dir():
        raise FileNotFoundError(f"Posts directory not found: {posts_dir}")
    suffixes = {ext.lower() for ext in extensions}
    return sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in suffixes)


def parse_post_filename(name: str) -> Tuple[date, str]:
    stem = Path(name).stem
    match = POST_FILENAME.match(stem)
    if not match:
        raise ValueError(f"'{name}' does not follow the YYYY-MM-DD-slug pattern")
    published = date.fromisoformat(match.group("date"))
    return published, match.group("slug")


def load_post(path) -> Post:
    """
    Read a post file. Raises PostParseError when the front matter is unusable.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    front_matter, body = split_front_matter(text, path)
    try:
        filename_date, slug = parse_post_filename(path.name)
    except ValueError:
        filename_date, slug = None, None
    return Post(
        path=path,
        front_matter=front_matter,
        body=body,
        filename_date=filename_date,
        slug=slug,
    )


def save_post(file_path, text: str) -> Path:
    file_path = Path(file_path)
    if file_path.exists():
        raise FileExistsError(f"Refusing to overwrite existing post: {file_path}")
    file_path.parent.mkdir(parents=True, exist_ok=True)
    with file_path.open("w", encoding="utf-8") as f:
        f.write(text)
    return file_path
