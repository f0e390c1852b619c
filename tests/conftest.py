import pytest

import core.logger


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep the event log, config lookup and env overrides inside tmp_path."""
    monkeypatch.setattr(core.logger, "LOG_FILE", str(tmp_path / "lint_log.json"))
    for name in ("POSTS_DIR", "LINK_CHECK_TIMEOUT", "LINK_CHECK_WORKERS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def posts_dir(tmp_path):
    path = tmp_path / "_posts"
    path.mkdir()
    return path


@pytest.fixture
def write_post(posts_dir):
    def _write(name, front_matter, body="Some words.\n"):
        path = posts_dir / name
        path.write_text(f"---\n{front_matter.strip()}\n---\n\n{body}", encoding="utf-8")
        return path

    return _write
