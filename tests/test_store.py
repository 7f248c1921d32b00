import json

import pytest

from ritsu.errors import RitsuError
from ritsu.store import PostRecord, SiteDatabase, load_database, save_database


def make_db(*names):
    return SiteDatabase(
        root_path="/tmp/blog",
        default_site_config={"siteName": "Blog"},
        default_theme_config={"postsPerPage": 10},
        post_data=[PostRecord(name, name.title(), 1000 + i) for i, name in enumerate(names)],
    )


def test_save_writes_full_record_with_wire_names(tmp_path):
    save_database(tmp_path, make_db("first", "second"))
    payload = json.loads((tmp_path / ".db.json").read_text(encoding="utf-8"))
    assert payload == {
        "rootPath": "/tmp/blog",
        "defaultSiteConfig": {"siteName": "Blog"},
        "defaultThemeConfig": {"postsPerPage": 10},
        "postData": [
            {"fileName": "first", "title": "First", "date": 1000},
            {"fileName": "second", "title": "Second", "date": 1001},
        ],
    }


def test_load_restores_order(tmp_path):
    save_database(tmp_path, make_db("b", "a", "c"))
    db = load_database(tmp_path)
    assert db.file_names() == ["b", "a", "c"]
    assert db.get_post("a") == PostRecord("a", "A", 1001)
    assert db.default_site_config == {"siteName": "Blog"}


def test_save_replaces_previous_content(tmp_path):
    save_database(tmp_path, make_db("one", "two"))
    db = load_database(tmp_path)
    db.remove_post("one")
    save_database(tmp_path, db)
    assert load_database(tmp_path).file_names() == ["two"]


def test_has_post_is_exact_and_order_independent():
    for db in (make_db("alpha", "beta"), make_db("beta", "alpha")):
        assert db.has_post("alpha")
        assert db.has_post("beta")
        assert not db.has_post("Alpha")
        assert not db.has_post("alph")
    assert not make_db().has_post("alpha")


def test_add_and_remove_post():
    db = make_db("alpha")
    db.add_post(PostRecord("beta", "Beta", 5))
    assert db.file_names() == ["alpha", "beta"]
    with pytest.raises(ValueError):
        db.add_post(PostRecord("alpha", "Again", 6))

    assert db.remove_post("alpha") is True
    assert db.remove_post("alpha") is False
    assert db.file_names() == ["beta"]


def test_load_tolerates_missing_optional_fields(tmp_path):
    (tmp_path / ".db.json").write_text(
        json.dumps({"rootPath": "/x", "postData": [{"fileName": "p"}]}),
        encoding="utf-8",
    )
    db = load_database(tmp_path)
    assert db.post_data == [PostRecord("p", "", 0)]
    assert db.default_theme_config == {}


def test_load_rejects_corrupt_store(tmp_path):
    (tmp_path / ".db.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(RitsuError):
        load_database(tmp_path)

    (tmp_path / ".db.json").write_text("[]", encoding="utf-8")
    with pytest.raises(RitsuError):
        load_database(tmp_path)


@pytest.mark.parametrize(
    "post_data",
    [
        [{"title": "No name", "date": 1}],
        [{"fileName": "a", "date": "soon"}],
        ["just-a-string"],
    ],
)
def test_load_rejects_malformed_records(tmp_path, post_data):
    (tmp_path / ".db.json").write_text(
        json.dumps({"rootPath": "/x", "postData": post_data}), encoding="utf-8"
    )
    with pytest.raises(RitsuError) as excinfo:
        load_database(tmp_path)
    assert "is malformed" in excinfo.value.message


def test_load_rejects_non_utf8_store(tmp_path):
    (tmp_path / ".db.json").write_bytes(b'{"rootPath": "\xff"}')
    with pytest.raises(RitsuError):
        load_database(tmp_path)
