import json
from pathlib import Path

import pytest

from config import DEFAULTS
from core.linter import PostLinter, load_schema
from models.post import ERROR, WARNING

VALID = """
layout: post
title: "Message passing in Erlang"
author: Ana Lima
date: 2015-03-18 14:00:00 +0000
categories: erlang concurrency
comments: true
"""


@pytest.fixture
def linter():
    return PostLinter(dict(DEFAULTS))


def rules(issues):
    return sorted(issue.rule for issue in issues)


def test_valid_post_has_no_issues(linter, write_post):
    path = write_post("2015-03-18-message-passing.md", VALID)

    post, issues = linter.lint_file(path)

    assert issues == []
    assert post.slug == "message-passing"
    assert post.authors == ["Ana Lima"]
    assert post.categories == ["erlang", "concurrency"]


def test_multiple_authors_list_is_accepted(linter, write_post):
    path = write_post(
        "2016-01-02-java-equality.md",
        'layout: post\ntitle: "Java equality"\nauthors:\n  - Ana\n  - Bo\n',
    )

    post, issues = linter.lint_file(path)

    assert issues == []
    assert post.authors == ["Ana", "Bo"]


def test_missing_front_matter(linter, posts_dir):
    path = posts_dir / "2015-03-18-no-meta.md"
    path.write_text("# Hello\n", encoding="utf-8")

    post, issues = linter.lint_file(path)

    assert post is None
    assert rules(issues) == ["front-matter"]


def test_missing_layout_and_title(linter, write_post):
    path = write_post("2015-03-18-bare.md", "author: Ana\n")

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["layout", "title"]
    assert all(issue.severity == ERROR for issue in issues)


def test_wrong_layout(linter, write_post):
    path = write_post("2015-03-18-page.md", 'layout: page\ntitle: "x"\nauthor: Ana\n')

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["layout"]
    assert "page" in issues[0].message


def test_blank_title(linter, write_post):
    path = write_post("2015-03-18-blank.md", 'layout: post\ntitle: "   "\nauthor: Ana\n')

    _, issues = linter.lint_file(path)

    assert [i.message for i in issues] == ["title must not be blank"]


def test_neither_author_nor_authors(linter, write_post):
    path = write_post("2015-03-18-anon.md", 'layout: post\ntitle: "Anonymous"\n')

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["author"]
    assert "exactly one" in issues[0].message


def test_both_author_and_authors(linter, write_post):
    path = write_post(
        "2015-03-18-both.md",
        'layout: post\ntitle: "Both"\nauthor: Ana\nauthors: [Bo]\n',
    )

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["author"]
    assert "not both" in issues[0].message


def test_empty_authors_list(linter, write_post):
    path = write_post("2015-03-18-empty.md", 'layout: post\ntitle: "Empty"\nauthors: []\n')

    _, issues = linter.lint_file(path)

    assert [i.message for i in issues] == ["authors must list at least one name"]


def test_comments_must_be_boolean(linter, write_post):
    path = write_post(
        "2015-03-18-comments.md",
        'layout: post\ntitle: "C"\nauthor: Ana\ncomments: "yes please"\n',
    )

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["schema"]
    assert issues[0].message.startswith("comments:")


def test_date_without_offset(linter, write_post):
    path = write_post(
        "2015-03-18-no-offset.md",
        'layout: post\ntitle: "D"\nauthor: Ana\ndate: 2015-03-18\n',
    )

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["date"]


def test_date_mismatch_is_a_warning(linter, write_post):
    path = write_post(
        "2015-03-17-off-by-one.md",
        'layout: post\ntitle: "D"\nauthor: Ana\ndate: 2015-03-18 01:00:00 +0200\n',
    )

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["date-mismatch"]
    assert issues[0].severity == WARNING


def test_bad_filename(linter, write_post):
    path = write_post("message-passing.md", VALID)

    post, issues = linter.lint_file(path)

    assert rules(issues) == ["filename"]
    assert post.filename_date is None


def test_duplicate_title_and_date(linter, write_post, posts_dir):
    write_post("2015-03-18-first.md", VALID)
    write_post("2015-03-18-second.md", VALID.replace("+0000", "+00:00"))
    write_post("2015-03-18-other.md", VALID.replace("Erlang", "Elixir"))

    result = linter.lint_directory(posts_dir)

    duplicates = [i for i in result.issues if i.rule == "duplicate"]
    assert sorted(i.path.name for i in duplicates) == [
        "2015-03-18-first.md",
        "2015-03-18-second.md",
    ]
    assert len(result.posts) == 3


def test_duplicates_fall_back_to_filename_date(linter, write_post, posts_dir):
    front_matter = 'layout: post\ntitle: "Same"\nauthor: Ana\n'
    write_post("2015-03-18-a.md", front_matter)
    write_post("2015-03-18-b.md", front_matter)
    write_post("2015-03-19-c.md", front_matter)

    result = linter.lint_directory(posts_dir)

    assert sorted(i.path.name for i in result.errors) == ["2015-03-18-a.md", "2015-03-18-b.md"]


def test_lint_directory_only_picks_markdown(linter, write_post, posts_dir):
    write_post("2015-03-18-message-passing.md", VALID)
    (posts_dir / "notes.txt").write_text("not a post", encoding="utf-8")

    result = linter.lint_directory(posts_dir)

    assert [p.path.name for p in result.posts] == ["2015-03-18-message-passing.md"]
    assert result.issues == []


def test_lint_directory_missing(linter, tmp_path):
    with pytest.raises(FileNotFoundError):
        linter.lint_directory(tmp_path / "nope")


def test_lint_writes_event_log(linter, write_post, posts_dir, tmp_path):
    write_post("2015-03-18-anon.md", 'layout: post\ntitle: "Anonymous"\n')

    linter.lint_directory(posts_dir)

    events = [json.loads(line) for line in (tmp_path / "lint_log.json").read_text().splitlines()]
    assert events[-1]["message"] == "Lint finished"
    assert events[-1]["extra"]["errors"] == 1
    assert any(e["type"] == "ERROR" and e["extra"]["rule"] == "author" for e in events)


def test_custom_layouts(write_post):
    config = dict(DEFAULTS, layouts=["post", "talk"])
    path = write_post("2015-03-18-talk.md", 'layout: talk\ntitle: "T"\nauthor: Ana\n')

    _, issues = PostLinter(config).lint_file(path)

    assert issues == []


def test_schema_example_is_valid():
    schema_file = load_schema("post_front_matter")
    linter = PostLinter(dict(DEFAULTS))

    assert list(linter.validator.iter_errors(schema_file["example"])) == []


@pytest.mark.parametrize("categories", ["5", "[python, 3]", "{a: b}"])
def test_categories_must_be_string_or_list_of_strings(linter, write_post, categories):
    path = write_post(
        "2015-03-18-cats.md",
        f'layout: post\ntitle: "Cats"\nauthor: Ana\ncategories: {categories}\n',
    )

    _, issues = linter.lint_file(path)

    assert rules(issues) == ["schema"]
    assert issues[0].message.startswith("categories:")


def test_file_that_is_not_utf8(linter, posts_dir):
    path = posts_dir / "2015-03-18-latin1.md"
    path.write_bytes('---\ntitle: "Café"\n---\n'.encode("latin-1"))

    post, issues = linter.lint_file(path)

    assert post is None
    assert [i.message for i in issues] == ["file is not valid UTF-8"]


def test_unreadable_path_is_reported(linter, posts_dir):
    _, issues = linter.lint_file(posts_dir)

    assert rules(issues) == ["front-matter"]
    assert issues[0].message.startswith("cannot read file")


def test_lint_paths_expands_directories(linter, write_post, posts_dir):
    write_post("2015-03-18-message-passing.md", VALID)
    write_post("2015-03-19-anon.md", 'layout: post\ntitle: "Anonymous"\n')

    result = linter.lint_paths([posts_dir])

    assert len(result.posts) == 2
    assert rules(result.issues) == ["author"]


def test_link_check_runs_when_enabled(write_post, posts_dir, monkeypatch):
    checked = []

    def fake_check(self, url):
        checked.append(url)
        return url, 404

    monkeypatch.setattr("core.link_checker.LinkChecker.check", fake_check)
    write_post(
        "2015-03-18-message-passing.md",
        VALID,
        body="Background: https://www.erlang.org/gone\n",
    )

    result = PostLinter(dict(DEFAULTS, check_links=True)).lint_directory(posts_dir)

    assert checked == ["https://www.erlang.org/gone"]
    assert [(i.rule, i.severity) for i in result.issues] == [("link", WARNING)]


def test_link_check_is_off_by_default(linter):
    assert linter.link_checker is None


def test_schema_ships_inside_core_package():
    import core

    assert (Path(core.__file__).parent / "schemas" / "post_front_matter.json").is_file()
