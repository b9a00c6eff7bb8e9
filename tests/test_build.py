from pathlib import Path

import pytest

from blog.build import BuildError, build_site, load_config
from blog.feeds import FeedRegistry, RSSGenerator, SitemapGenerator, create_default_feed_registry
from blog.listing import ListingEntry


def create_project(tmp_path: Path, config: str = "") -> Path:
    root = tmp_path / "project"
    site = root / "site"
    (site / "_layouts").mkdir(parents=True)
    (site / "posts").mkdir()
    (site / "_layouts" / "default.html.jinja").write_text(
        "<html><body>{{ page_content }}</body></html>", encoding="utf-8"
    )
    (site / "index.html.jinja").write_text(
        '<section>{{ render_listing(pages) }}</section><a href="/about/">about</a>',
        encoding="utf-8",
    )
    (site / "about.md").write_text("Just prose, no title.\n", encoding="utf-8")
    (site / "posts" / "2020-01-01-first.md").write_text(
        "---\ntitle: First & foremost\n---\nOne\n", encoding="utf-8"
    )
    (site / "posts" / "2020-02-01-second.md").write_text(
        "---\ntitle: Second\ndescription: The sequel\n---\nTwo\n", encoding="utf-8"
    )
    (site / "posts" / "_wip.md").write_text(
        "---\ntitle: Work in progress\ndate: 2030-01-01\n---\n", encoding="utf-8"
    )
    if config:
        (root / "blog.yaml").write_text(config, encoding="utf-8")
    return root


def test_build_site_writes_pages_and_listing(tmp_path):
    root = create_project(tmp_path)
    result = build_site(root)
    out = result.output_dir
    assert out == root / "output"
    assert len(result.pages) == 4
    assert (out / "about" / "index.html").exists()
    assert (out / "posts" / "first" / "index.html").exists()
    assert not (out / "posts" / "wip").exists()

    index = (out / "index.html").read_text(encoding="utf-8")
    assert index.index("Second") < index.index("First &amp; foremost")
    assert "<h3>The sequel</h3>" in index
    assert index.count('<div class="spacer"></div>') == 1
    assert "about" not in index.split("</section>")[0]
    # no site url configured, so no feeds
    assert result.feeds == []


def test_build_includes_drafts_and_uses_config(tmp_path):
    root = create_project(
        tmp_path,
        "title: Notes\nurl: https://example.com\nroot_url: https://example.com/blog\n"
        "output_dir: public\ndate_format: '%d/%m/%Y'\n",
    )
    result = build_site(root, include_drafts=True)
    out = result.output_dir
    assert out == root / "public"
    index = (out / "index.html").read_text(encoding="utf-8")
    assert index.index("Work in progress") < index.index("Second")
    assert ">01/02/2020</time>" in index
    assert 'href="https://example.com/blog/posts/second/"' in index
    assert 'href="https://example.com/blog/about/"' in index
    assert sorted(result.feeds) == ["rss.xml", "sitemap.xml"]

    rss = (out / "rss.xml").read_text(encoding="utf-8")
    assert "<title>Notes</title>" in rss
    assert "<title>First &amp; foremost</title>" in rss
    assert rss.index("Work in progress") < rss.index("Second") < rss.index("First")
    assert "<pubDate>Sat, 01 Feb 2020 00:00:00 +0000</pubDate>" in rss

    sitemap = (out / "sitemap.xml").read_text(encoding="utf-8")
    assert "<loc>https://example.com/posts/second/</loc><lastmod>2020-02-01</lastmod>" in sitemap
    assert "about" not in sitemap


def test_build_output_override_cleans_directory(tmp_path):
    root = create_project(tmp_path)
    target = tmp_path / "elsewhere"
    target.mkdir()
    (target / "stale.html").write_text("old", encoding="utf-8")
    result = build_site(root, output_dir_override=target)
    assert result.output_dir == target
    assert not (target / "stale.html").exists()
    assert (target / "index.html").exists()


def test_build_error_has_file_context(tmp_path):
    root = create_project(tmp_path)
    broken = root / "site" / "broken.html.jinja"
    broken.write_text("{% if %}", encoding="utf-8")
    with pytest.raises(BuildError) as excinfo:
        build_site(root)
    assert excinfo.value.source_path == broken
    assert "Template syntax error" in excinfo.value.message

    broken.write_text("{{ missing.attr }}", encoding="utf-8")
    with pytest.raises(BuildError) as excinfo:
        build_site(root)
    assert excinfo.value.message.startswith("Undefined variable")


def test_missing_site_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        build_site(tmp_path)


def test_load_config_defaults_and_overrides(tmp_path):
    assert load_config(tmp_path)["output_dir"] == "output"
    (tmp_path / "blog.yaml").write_text("title: Mine\nreverse_ties: false\n", encoding="utf-8")
    config = load_config(tmp_path)
    assert config["title"] == "Mine"
    assert config["reverse_ties"] is False
    assert config["output_dir"] == "output"
    (tmp_path / "blog.yaml").write_text("- not a mapping\n", encoding="utf-8")
    assert load_config(tmp_path)["title"] == "Blog"


def test_feed_generators_skip_without_url(tmp_path):
    entries = [ListingEntry(title="T", url="/t/", description=None, date=None, last=True)]
    assert SitemapGenerator().generate(entries, {}) is None
    assert RSSGenerator().generate(entries, {"url": ""}) is None
    registry = FeedRegistry()
    registry.register(RSSGenerator())
    assert registry.generate_all(tmp_path, [], {}) == []
    assert not (tmp_path / "rss.xml").exists()


def test_feeds_handle_missing_optional_fields():
    entries = [
        ListingEntry(title="No link", url=None, description=None, date=None, last=False),
        ListingEntry(title="External", url="https://other.example/x", description="d", date=None, last=True),
    ]
    config = {"url": "https://example.com/"}
    rss = RSSGenerator().generate(entries, config)
    assert "<item><title>No link</title><description>No link</description></item>" in rss
    assert "<link>https://other.example/x</link>" in rss
    sitemap = SitemapGenerator().generate(entries, config)
    assert "<loc>https://example.com/</loc>" in sitemap
    assert "No link" not in sitemap
    assert "<loc>https://other.example/x</loc></url>" in sitemap
    assert [type(g).__name__ for g in create_default_feed_registry()._generators] == [
        "SitemapGenerator",
        "RSSGenerator",
    ]


def test_url_override_cannot_escape_output(tmp_path):
    root = create_project(tmp_path)
    sneaky = root / "site" / "posts" / "sneaky.md"
    sneaky.write_text("---\ntitle: Sneaky\nurl: ../../escaped/\n---\n", encoding="utf-8")
    with pytest.raises(BuildError) as excinfo:
        build_site(root)
    assert excinfo.value.source_path == sneaky
    assert "outside the output directory" in excinfo.value.message
    assert not (tmp_path / "escaped").exists()


def test_external_url_is_written_at_file_location(tmp_path):
    root = create_project(tmp_path)
    (root / "site" / "posts" / "elsewhere.md").write_text(
        "---\ntitle: Elsewhere\nurl: https://elsewhere.example/p/\n---\n", encoding="utf-8"
    )
    (root / "site" / "posts" / "cdn.md").write_text(
        "---\ntitle: Protocol relative\nurl: //cdn.example/q/\n---\n", encoding="utf-8"
    )
    result = build_site(root)
    out = result.output_dir
    assert (out / "posts" / "elsewhere" / "index.html").exists()
    assert (out / "posts" / "cdn" / "index.html").exists()
    assert not any(
        part.startswith(("https:", "cdn.example"))
        for path in out.rglob("index.html")
        for part in path.relative_to(out).parts
    )
    index = (out / "index.html").read_text(encoding="utf-8")
    assert '<a href="https://elsewhere.example/p/">Elsewhere</a>' in index


def test_duplicate_urls_are_rejected(tmp_path):
    root = create_project(tmp_path)
    (root / "site" / "posts" / "clash.md").write_text(
        "---\ntitle: Clash\nurl: /posts/second/\n---\n", encoding="utf-8"
    )
    with pytest.raises(BuildError) as excinfo:
        build_site(root)
    assert "already used by another page" in excinfo.value.message
