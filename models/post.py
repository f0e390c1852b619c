# models/post.py
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import List, Optional

from utils.front_matter import split_categories

ERROR = "error"
WARNING = "warning"


@dataclass
class Post:
    path: Path
    front_matter: dict
    body: str = ""
    filename_date: Optional[date] = None
    slug: Optional[str] = None

    @property
    def title(self):
        return self.front_matter.get("title")

    @property
    def authors(self) -> List[str]:
        """
        Author names regardless of whether the post uses `author` or `authors`.
        """
        if "authors" in self.front_matter:
            authors = self.front_matter["authors"]
            if isinstance(authors, str):
                return [authors]
            return list(authors or [])
        author = self.front_matter.get("author")
        return [author] if author else []

    @property
    def categories(self) -> List[str]:
        return split_categories(self.front_matter.get("categories"))


@dataclass
class LintIssue:
    path: Path
    rule: str
    message: str
    severity: str = ERROR

    def __str__(self):
        return f"{self.path}: {self.severity} [{self.rule}] {self.message}"


@dataclass
class LintResult:
    posts: List[Post] = field(default_factory=list)
    issues: List[LintIssue] = field(default_factory=list)

    @property
    def errors(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == ERROR]

    @property
    def warnings(self) -> List[LintIssue]:
        return [i for i in self.issues if i.severity == WARNING]
