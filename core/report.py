from datetime import timezone
from pathlib import Path
from typing import List, Optional

import pandas as pd

from models.post import ERROR, WARNING, LintIssue, Post
from utils.front_matter import parse_timestamp

POST_COLUMNS = ["path", "title", "date"]
ISSUE_COLUMNS = ["path", "severity", "rule", "message"]


def effective_date(post: Post) -> Optional[str]:
    """
    The front matter timestamp in UTC, falling back to the filename date.
    """
    if "date" in post.front_matter:
        try:
            published = parse_timestamp(post.front_matter["date"])
        except ValueError:
            published = None
        if published is not None:
            return published.astimezone(timezone.utc).isoformat()
    if post.filename_date:
        return post.filename_date.isoformat()
    return None


def posts_to_frame(posts: List[Post]) -> pd.DataFrame:
    rows = [
        {"path": str(post.path), "title": post.title, "date": effective_date(post)}
        for post in posts
    ]
    return pd.DataFrame(rows, columns=POST_COLUMNS)


def find_duplicates(posts: List[Post]) -> List[LintIssue]:
    """
    Report every post whose title and effective date are shared with another post.
    """
    df = posts_to_frame(posts)
    if df.empty:
        return []

    has_title = df["title"].apply(lambda t: isinstance(t, str) and bool(t.strip()))
    df = df[has_title & df["date"].notna()]
    dupes = df[df.duplicated(subset=["title", "date"], keep=False)]

    issues = []
    for (title, when), group in dupes.groupby(["title", "date"], sort=True):
        paths = list(group["path"])
        for path in paths:
            others = ", ".join(p for p in paths if p != path)
            issues.append(
                LintIssue(
                    Path(path),
                    "duplicate",
                    f"title '{title}' and date {when} are also used by {others}",
                )
            )
    return issues


def issues_to_frame(issues: List[LintIssue]) -> pd.DataFrame:
    rows = [
        {
            "path": str(issue.path),
            "severity": issue.severity,
            "rule": issue.rule,
            "message": issue.message,
        }
        for issue in issues
    ]
    return pd.DataFrame(rows, columns=ISSUE_COLUMNS)


def write_report(issues: List[LintIssue], report_path) -> Path:
    path = Path(report_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    issues_to_frame(issues).to_csv(path, index=False)
    return path


def summarize(issues: List[LintIssue]) -> dict:
    df = issues_to_frame(issues)
    return {
        "errors": int((df["severity"] == ERROR).sum()),
        "warnings": int((df["severity"] == WARNING).sum()),
        "files": int(df["path"].nunique()),
    }
