import subprocess
from pathlib import Path

import pytest

from ritsu.errors import MissingToolError
from ritsu.themes import fetch_theme, install_bundled_theme, theme_repo_url


@pytest.fixture
def fake_git(monkeypatch):
    """Replace git with a recorder; tests decide what the clone produces."""
    monkeypatch.delenv("RITSU_SKIP_THEME_FETCH", raising=False)
    monkeypatch.setattr("ritsu.themes.shutil.which", lambda name: "/usr/bin/git")
    calls = []
    behaviour = {"returncode": 0, "stderr": "", "layout": True}

    def fake_run(cmd, capture_output=None, text=None, env=None):
        calls.append(cmd)
        behaviour["env"] = env
        target = cmd[-1]
        if behaviour["returncode"] == 0:
            clone = Path(target)
            clone.mkdir(parents=True)
            (clone / "README.md").write_text("theme", encoding="utf-8")
            if behaviour["layout"]:
                (clone / "layout").mkdir()
        return subprocess.CompletedProcess(cmd, behaviour["returncode"], "", behaviour["stderr"])

    monkeypatch.setattr("ritsu.themes.subprocess.run", fake_run)
    return calls, behaviour


def test_clone_success(tmp_path, fake_git):
    calls, behaviour = fake_git
    target = fetch_theme(tmp_path, "notes")
    assert target == tmp_path / "notes"
    assert (target / "README.md").exists()
    assert not (target / "theme-config.yaml").exists()
    assert calls == [
        ["/usr/bin/git", "clone", "--depth", "1", theme_repo_url(), str(target)]
    ]
    assert behaviour["env"]["GIT_TERMINAL_PROMPT"] == "0"


def test_clone_uses_configured_repository(tmp_path, fake_git, monkeypatch):
    calls, _ = fake_git
    monkeypatch.setenv("RITSU_THEME_REPO", "https://example.com/theme.git")
    fetch_theme(tmp_path, "custom")
    assert calls[0][4] == "https://example.com/theme.git"


def test_failed_clone_falls_back_to_bundled_theme(tmp_path, fake_git, capsys):
    _, behaviour = fake_git
    behaviour.update(returncode=128, stderr="Cloning...\nfatal: repository not found\n")
    target = fetch_theme(tmp_path, "notes")
    assert (target / "layout" / "post.html.jinja").exists()
    assert (target / "theme-config.yaml").exists()
    assert "fatal: repository not found" in capsys.readouterr().err


def test_clone_without_template_dir_falls_back(tmp_path, fake_git, capsys):
    _, behaviour = fake_git
    behaviour["layout"] = False
    target = fetch_theme(tmp_path, "notes")
    assert not (target / "README.md").exists()
    assert (target / "layout" / "layout.html.jinja").exists()
    assert "no layout/ directory" in capsys.readouterr().err


def test_missing_git(tmp_path, monkeypatch):
    monkeypatch.delenv("RITSU_SKIP_THEME_FETCH", raising=False)
    monkeypatch.setattr("ritsu.themes.shutil.which", lambda name: None)
    with pytest.raises(MissingToolError) as excinfo:
        fetch_theme(tmp_path)
    assert excinfo.value.tool == "git"
    assert not (tmp_path / "notes").exists()


def test_skip_fetch_installs_bundled_theme(tmp_path, monkeypatch):
    monkeypatch.setattr("ritsu.themes.shutil.which", lambda name: pytest.fail("git used"))
    target = fetch_theme(tmp_path, "mine")
    assert target == tmp_path / "mine"
    assert (target / "resources" / "style.css").exists()


def test_install_bundled_theme(tmp_path):
    target = install_bundled_theme(tmp_path / "themes")
    assert sorted(p.name for p in (target / "layout").iterdir()) == [
        "archive.html.jinja",
        "index.html.jinja",
        "layout.html.jinja",
        "post.html.jinja",
    ]
