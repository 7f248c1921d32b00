import pytest

from ritsu.config import (
    EffectiveConfig,
    load_default_site_config,
    load_default_theme_config,
    resolve_config,
)
from ritsu.errors import ConfigError


def write_configs(root, site="siteName: Mine\n", theme="postsPerPage: 3\n"):
    (root / "site-config.yaml").write_text(site, encoding="utf-8")
    (root / "theme-config.yaml").write_text(theme, encoding="utf-8")


def test_shipped_defaults_cover_documented_keys():
    site = load_default_site_config()
    for key in (
        "siteName",
        "author",
        "createTime",
        "theme",
        "pageDir",
        "archiveDir",
        "postDir",
        "templateDir",
        "repoURL",
        "branch",
        "commitMsg",
    ):
        assert key in site
    assert site["theme"] == "notes"
    assert load_default_theme_config()["postsPerPage"] == 10


def test_resolve_config_overlays_user_values(tmp_path):
    write_configs(tmp_path, theme="postsPerPage: 3\naccent: teal\n")
    config = resolve_config(tmp_path)
    assert config.site["siteName"] == "Mine"
    assert config.site["postDir"] == "posts"
    assert config.theme["postsPerPage"] == 3
    assert config.theme["accent"] == "teal"
    assert config.theme["dateFormat"] == "%Y-%m-%d"


def test_resolve_config_accepts_empty_file(tmp_path):
    write_configs(tmp_path, site="", theme="# only comments\n")
    config = resolve_config(tmp_path)
    assert config.site == load_default_site_config()
    assert config.theme == load_default_theme_config()


def test_resolve_config_requires_user_files(tmp_path):
    (tmp_path / "site-config.yaml").write_text("siteName: x\n", encoding="utf-8")
    with pytest.raises(ConfigError) as excinfo:
        resolve_config(tmp_path)
    assert "theme-config.yaml" in excinfo.value.message


@pytest.mark.parametrize("site", ["siteName: [broken\n", "- a\n- b\n"])
def test_resolve_config_rejects_bad_files(tmp_path, site):
    write_configs(tmp_path, site=site)
    with pytest.raises(ConfigError):
        resolve_config(tmp_path)


def test_effective_config_helpers():
    config = EffectiveConfig(site={"postDir": "/articles/", "pageDir": "", "theme": ""})
    assert config.dir_name("postDir", "posts") == "articles"
    assert config.dir_name("pageDir", "page") == "page"
    assert config.dir_name("archiveDir", "archive") == "archive"
    assert config.theme_name == "notes"


def test_resolve_config_rejects_non_utf8_file(tmp_path):
    write_configs(tmp_path)
    (tmp_path / "theme-config.yaml").write_bytes(b"footer: \xff\xfe\n")
    with pytest.raises(ConfigError) as excinfo:
        resolve_config(tmp_path)
    assert "theme-config.yaml" in excinfo.value.message
