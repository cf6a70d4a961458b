from datetime import date

from click.testing import CliRunner

from folio.cli import cli
from folio.frontmatter import split_front_matter
from folio.utils import encode_id

FIRST_POST = "_posts/2024-01-15-first-post.md"


def invoke(project, *args):
    return CliRunner().invoke(cli, ["--root", str(project), *args])


def test_cli_list_posts(project):
    result = invoke(project, "list", "posts")
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == (
        f"{encode_id('_posts/2024-03-02-second-post.md')}  "
        "_posts/2024-03-02-second-post.md  Second Post"
    )
    assert [line.split("  ")[2] for line in lines] == ["Second Post", "First Post", "Holiday"]

    result = invoke(project, "list", "post", "--order-by", "title", "--asc")
    assert result.exit_code == 0
    assert [line.split("  ")[2] for line in result.output.splitlines()] == [
        "First Post",
        "Holiday",
        "Second Post",
    ]


def test_cli_new_post(project):
    result = invoke(
        project,
        "new",
        "posts",
        "--title",
        "CLI Post",
        "--set",
        "date=2024-05-01",
        "--set",
        "draft=true",
        "--content",
        "Written from the shell.\n",
    )
    assert result.exit_code == 0
    assert "Created _posts/2024-05-01-cli-post.md" in result.output
    text = (project / "src" / "_posts" / "2024-05-01-cli-post.md").read_text(encoding="utf-8")
    assert split_front_matter(text) == (
        {"title": "CLI Post", "date": date(2024, 5, 1), "draft": True},
        "Written from the shell.\n",
    )


def test_cli_new_page_named_after_name(project):
    result = invoke(project, "new", "pages", "--name", "Contact Us")
    assert result.exit_code == 0
    assert "Created contact-us.md" in result.output
    text = (project / "src" / "contact-us.md").read_text(encoding="utf-8")
    assert split_front_matter(text) == ({"name": "Contact Us"}, "")


def test_cli_new_prompts_for_label(project, monkeypatch):
    prompted = {}

    class FakeQuestion:
        def __init__(self, answer):
            self.answer = answer

        def ask(self):
            return self.answer

    def fake_select(message, choices, style=None):
        prompted["choices"] = choices
        return FakeQuestion("pages")

    monkeypatch.setattr("folio.cli.questionary.select", fake_select)
    result = invoke(project, "new", "--title", "New Page")
    assert result.exit_code == 0
    assert prompted["choices"] == ["pages", "authors", "posts"]
    assert "Created new-page.md" in result.output
    assert (project / "src" / "new-page.md").exists()

    monkeypatch.setattr(
        "folio.cli.questionary.select", lambda message, choices, style=None: FakeQuestion(None)
    )
    result = invoke(project, "new", "--title", "Cancelled")
    assert result.exit_code != 0
    assert not (project / "src" / "cancelled.md").exists()


def test_cli_unknown_label_reports_error(project):
    result = invoke(project, "new", "widgets", "--title", "Nope")
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert "widgets" in result.output


def test_cli_show_prints_file_output(project):
    result = invoke(project, "show", "posts", encode_id(FIRST_POST))
    assert result.exit_code == 0
    assert result.output == (project / "src" / FIRST_POST).read_text(encoding="utf-8")


def test_cli_set_updates_front_matter(project):
    result = invoke(project, "set", "posts", FIRST_POST, "rating=10", "subtitle=More words")
    assert result.exit_code == 0
    assert f"Updated {FIRST_POST}" in result.output
    data, body = split_front_matter((project / "src" / FIRST_POST).read_text(encoding="utf-8"))
    assert data["rating"] == 10
    assert data["subtitle"] == "More words"
    assert data["custom"] == "hand edited"
    assert body == "Hello from the first post.\n"

    result = invoke(project, "set", "posts", FIRST_POST, "novalue")
    assert result.exit_code == 2


def test_cli_destroy(project):
    result = invoke(project, "destroy", "posts", encode_id(FIRST_POST))
    assert result.exit_code == 0
    assert f"Deleted {FIRST_POST}" in result.output
    assert not (project / "src" / FIRST_POST).exists()

    result = invoke(project, "destroy", "posts", encode_id(FIRST_POST))
    assert result.exit_code != 0
    assert "No posts entry found" in result.output
