from pathlib import Path

import pytest

from folio.hooks import default_hook_registry
from folio.site import Site


def write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def create_project(root: Path) -> Path:
    """Lay out a small blog: three posts, two authors, two pages and noise."""
    write(
        root / "folio.config.yml",
        "time: 2024-06-01 12:00:00\ncollections:\n  - authors\n",
    )
    src = root / "src"
    write(
        src / "_posts" / "2024-01-15-first-post.md",
        "---\n"
        "title: First Post\n"
        "date: 2024-01-15\n"
        "tags:\n"
        "- python\n"
        "rating: 3\n"
        "custom: hand edited\n"
        "---\n"
        "\n"
        "Hello from the first post.\n",
    )
    write(
        src / "_posts" / "2024-03-02-second-post.md",
        "---\ntitle: Second Post\ndate: 2024-03-02\nrating: 5\n---\n\nSecond body.\n",
    )
    write(
        src / "_posts" / "2023-12-24-holiday.md",
        "---\ntitle: Holiday\nrating: five\n---\n\nSeason's greetings.\n",
    )
    write(src / "_authors" / "jane.yml", "name: Jane\nbio: Writes about Python.\n")
    write(src / "_authors" / "john.md", "---\nname: John\n---\n\nJohn's page.\n")
    write(src / "about.md", "---\ntitle: About\nlayout: page\n---\n\nAbout us.\n")
    write(src / "index.html", "---\ntitle: Home\n---\n\n<h1>Home</h1>\n")
    write(src / "_layouts" / "default.html", "<html></html>\n")
    write(src / "node_modules" / "pkg" / "README.md", "# ignored\n")
    write(src / "notes.txt", "ignored\n")
    return root


@pytest.fixture
def project(tmp_path) -> Path:
    return create_project(tmp_path / "blog")


@pytest.fixture
def site(project) -> Site:
    return Site.from_root(project)


@pytest.fixture(autouse=True)
def clear_hooks():
    yield
    default_hook_registry.clear()
