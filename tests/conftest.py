from pathlib import Path

import pytest

from ritsu.engine import init_blog


@pytest.fixture(autouse=True)
def skip_theme_fetch(monkeypatch):
    monkeypatch.setenv("RITSU_SKIP_THEME_FETCH", "1")
    monkeypatch.delenv("RITSU_THEME_REPO", raising=False)


@pytest.fixture
def blog(tmp_path) -> Path:
    """A freshly initialized blog with the bundled theme."""
    return init_blog("blog", cwd=tmp_path)


def write_post(path: Path, title: str | None, body: str = "Hello.\n", **fields) -> Path:
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    for key, value in fields.items():
        lines.append(f"{key}: {value}")
    lines.append("---")
    path.write_text("\n".join(lines) + "\n\n" + body, encoding="utf-8")
    return path
