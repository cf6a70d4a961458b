import base64
from datetime import date, datetime, timezone
from pathlib import Path

from folio import utils


def test_slugify_strips_punctuation():
    assert utils.slugify("Hello World!") == "hello-world"
    assert utils.slugify("2020-2021-2022-review") == "2020-2021-2022-review"
    assert utils.slugify("  Mixed CASE -- slug  ") == "mixed-case-slug"
    assert utils.slugify("!!!") == ""


def test_pluralize_collection_labels():
    assert utils.pluralize("post") == "posts"
    assert utils.pluralize("posts") == "posts"
    assert utils.pluralize("category") == "categories"
    assert utils.pluralize("day") == "days"
    assert utils.pluralize("box") == "boxes"
    assert utils.pluralize("") == ""


def test_ids_are_unpadded_base64url():
    relative_path = "_posts/2024-01-15-first-post.md"
    identifier = utils.encode_id(relative_path)
    assert "=" not in identifier
    assert "." not in identifier
    assert utils.decode_id(identifier) == relative_path

    assert utils.decode_id("a") is None
    not_utf8 = base64.urlsafe_b64encode(b"\xff\xfe").decode("ascii").rstrip("=")
    assert utils.decode_id(not_utf8) is None


def test_extract_and_coerce_dates():
    assert utils.extract_date_from_name("2024-01-15-cool") == datetime(2024, 1, 15)
    assert utils.extract_date_from_name("2024-01-15") == datetime(2024, 1, 15)
    assert utils.extract_date_from_name("invalid") is None
    assert utils.extract_date_from_name("2024-13-32-post") is None

    assert utils.coerce_datetime(date(2024, 1, 2)) == datetime(2024, 1, 2)
    assert utils.coerce_datetime("2024-01-02") == datetime(2024, 1, 2)
    assert utils.coerce_datetime("2024-01-02 10:30:00") == datetime(2024, 1, 2, 10, 30)
    aware = datetime(2024, 1, 2, 8, 0, tzinfo=timezone.utc)
    assert utils.coerce_datetime(aware) == datetime(2024, 1, 2, 8, 0)
    assert utils.coerce_datetime("garbage") is None
    assert utils.coerce_datetime(5) is None


def test_deep_merge_merges_nested_mappings_only():
    base = {"a": {"x": 1, "y": 2}, "list": [1, 2], "keep": True}
    merged = utils.deep_merge(base, {"a": {"y": 3}, "list": [3]})
    assert merged == {"a": {"x": 1, "y": 3}, "list": [3], "keep": True}
    assert base["a"] == {"x": 1, "y": 2}


def test_path_helpers():
    assert utils.is_internal_path(Path("_posts/hello.md"))
    assert not utils.is_internal_path(Path("blog/hello.md"))
    assert utils.is_content_file(Path("index.html"))
    assert not utils.is_content_file(Path("data.yml"))
    assert utils.is_data_file(Path("authors/jane.yaml"))
    assert utils.is_data_file(Path("feed.json"))
    assert not utils.is_data_file(Path("notes.txt"))
