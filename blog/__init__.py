"""A static blog built with Markdown and Jinja2 templates.

The index page lists every titled page newest first; articles are Markdown
files with YAML front matter under site/posts/.

The main entry point is the CLI module, which builds the site, prints the
index order and creates new posts.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
