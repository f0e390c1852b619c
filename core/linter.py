import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jsonschema import Draft7Validator

from core.errors import PostParseError
from core.link_checker import LinkChecker
from core.logger import log_event, log_issue
from core.report import find_duplicates
from models.post import WARNING, LintIssue, LintResult, Post
from utils.file_handler import find_posts, load_post, parse_post_filename
from utils.front_matter import parse_timestamp

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"

FIELD_RULES = {
    "layout": "layout",
    "title": "title",
    "author": "author",
    "authors": "author",
}

FRIENDLY_MESSAGES = {
    ("title", "pattern"): "title must not be blank",
    ("author", "pattern"): "author must not be blank",
    ("authors", "pattern"): "authors must not contain blank names",
    ("authors", "minItems"): "authors must list at least one name",
}


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load the JSON schema file containing both example and schema."""
    path = SCHEMA_DIR / f"{schema_name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {schema_name}")
    return json.loads(path.read_text(encoding="utf-8"))


class PostLinter:
    def __init__(self, config: dict, link_checker: Optional[LinkChecker] = None):
        self.config = config
        self.validator = Draft7Validator(load_schema("post_front_matter")["format"])
        if link_checker is None and config.get("check_links"):
            link_checker = LinkChecker(
                timeout=config["link_timeout"],
                workers=config["link_workers"],
            )
        self.link_checker = link_checker

    def lint_file(self, path) -> Tuple[Optional[Post], List[LintIssue]]:
        path = Path(path)
        try:
            post = load_post(path)
        except PostParseError as err:
            return None, [LintIssue(path, "front-matter", str(err))]
        except UnicodeDecodeError:
            return None, [LintIssue(path, "front-matter", "file is not valid UTF-8")]
        except OSError as err:
            return None, [LintIssue(path, "front-matter", f"cannot read file: {err.strerror or err}")]
        return post, self.lint_post(post)

    def lint_post(self, post: Post) -> List[LintIssue]:
        issues = []
        issues.extend(self._check_filename(post))
        issues.extend(self._check_schema(post))
        issues.extend(self._check_layout(post))
        issues.extend(self._check_date(post))
        return issues

    def lint_paths(self, paths: Iterable) -> LintResult:
        result = LintResult()
        for path in self._expand(paths):
            post, issues = self.lint_file(path)
            if post is not None:
                result.posts.append(post)
            result.issues.extend(issues)

        result.issues.extend(find_duplicates(result.posts))
        if self.link_checker is not None:
            result.issues.extend(self.link_checker.check_posts(result.posts))

        for issue in result.issues:
            log_issue(issue)
        log_event(
            "INFO",
            "Lint finished",
            {
                "posts": len(result.posts),
                "errors": len(result.errors),
                "warnings": len(result.warnings),
            },
        )
        return result

    def lint_directory(self, posts_dir=None) -> LintResult:
        posts_dir = posts_dir or self.config["posts_dir"]
        log_event("INFO", f"Linting posts in {posts_dir}")
        return self.lint_paths(find_posts(posts_dir, self.config["extensions"]))

    def _expand(self, paths: Iterable) -> List[Path]:
        # directories given on the command line are linted like the posts directory
        expanded = []
        for path in paths:
            path = Path(path)
            if path.is_dir():
                expanded.extend(find_posts(path, self.config["extensions"]))
            else:
                expanded.append(path)
        return expanded

    def _check_filename(self, post: Post) -> List[LintIssue]:
        try:
            parse_post_filename(post.path.name)
        except ValueError as err:
            return [LintIssue(post.path, "filename", str(err))]
        return []

    def _check_schema(self, post: Post) -> List[LintIssue]:
        issues = []
        errors = sorted(self.validator.iter_errors(post.front_matter), key=lambda e: [str(p) for p in e.path])
        for error in errors:
            if error.validator == "required":
                continue
            issues.append(self._schema_issue(post, error))

        # one issue per missing field, jsonschema repeats the whole list on each error
        required = self.validator.schema.get("required", [])
        missing = [
            LintIssue(post.path, FIELD_RULES.get(key, "schema"), f"missing required field '{key}'")
            for key in required
            if key not in post.front_matter
        ]
        return missing + issues

    def _schema_issue(self, post: Post, error) -> LintIssue:
        fm = post.front_matter
        if error.validator == "oneOf" and not error.path:
            if "author" in fm and "authors" in fm:
                message = "use either 'author' or 'authors', not both"
            else:
                message = "exactly one of 'author' or 'authors' is required"
            return LintIssue(post.path, "author", message)

        field = error.path[0] if error.path else None
        message = FRIENDLY_MESSAGES.get((field, error.validator), f"{field}: {error.message}")
        return LintIssue(post.path, FIELD_RULES.get(field, "schema"), message)

    def _check_layout(self, post: Post) -> List[LintIssue]:
        layout = post.front_matter.get("layout")
        if isinstance(layout, str) and layout not in self.config["layouts"]:
            allowed = ", ".join(self.config["layouts"])
            return [LintIssue(post.path, "layout", f"layout '{layout}' is not one of: {allowed}")]
        return []

    def _check_date(self, post: Post) -> List[LintIssue]:
        if "date" not in post.front_matter:
            return []
        try:
            published = parse_timestamp(post.front_matter["date"])
        except ValueError as err:
            return [LintIssue(post.path, "date", f"invalid date: {err}")]

        if post.filename_date and published.date() != post.filename_date:
            return [
                LintIssue(
                    post.path,
                    "date-mismatch",
                    f"front matter date {published.date()} differs from filename date {post.filename_date}",
                    WARNING,
                )
            ]
        return []
