"""HTML export pages for generated artifacts."""

import html
import re
from datetime import datetime

from markdown_it import MarkdownIt

from reposentry import __version__

MERMAID_SCRIPT = "https://cdn.jsdelivr.net/npm/mermaid@11/dist/mermaid.min.js"

_MERMAID_BLOCK = re.compile(r'<pre><code class="language-mermaid">([\s\S]*?)</code></pre>')

# Raw HTML in analyzed repositories is untrusted: with html disabled,
# markdown-it escapes it instead of passing it through.
_markdown = MarkdownIt("commonmark", {"html": False}).enable("table").enable("strikethrough")


def render_markdown(markdown: str) -> str:
    """Render markdown to safe HTML with mermaid fences as diagram containers."""
    rendered = _markdown.render(markdown)
    return _MERMAID_BLOCK.sub(r'<div class="mermaid">\1</div>', rendered)


def render_mermaid(diagram: str) -> str:
    """Wrap raw mermaid source in a diagram container."""
    return f'<div class="mermaid">{html.escape(diagram)}</div>'


def render_preformatted(content: str) -> str:
    """Wrap arbitrary text in an escaped preformatted block."""
    return f"<pre><code>{html.escape(content)}</code></pre>"


def wrap_page(title: str, body_html: str) -> str:
    """Wrap rendered content in a standalone HTML page."""
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{html.escape(title)} | RepoSentry Export</title>
    <script src="{MERMAID_SCRIPT}"></script>
    <style>
        body {{ font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif; margin: 24px; line-height: 1.55; }}
        pre {{ background: #0b1020; color: #e6edf3; padding: 14px; border-radius: 10px; overflow: auto; }}
        code {{ font-family: ui-monospace, SFMono-Regular, Menlo, Consolas, monospace; font-size: 12px; }}
        table {{ border-collapse: collapse; }}
        th, td {{ padding: 0.4rem 0.8rem; border: 1px solid #e5e7eb; text-align: left; }}
        .mermaid {{ background: #fff; border: 1px solid #e5e7eb; border-radius: 12px; padding: 14px; overflow: auto; }}
    </style>
</head>
<body>
    {body_html}
    <script>
        try {{ mermaid.initialize({{ startOnLoad: true, theme: 'default' }}); }} catch (e) {{}}
    </script>
</body>
</html>
"""


def render_index(pages: list[tuple[str, str]], generated_at: datetime | None = None) -> str:
    """Render the export index.

    Args:
        pages: (source path, html path relative to the html/ directory) pairs
        generated_at: Timestamp shown in the page header

    Returns:
        HTML string
    """
    generated_at = generated_at or datetime.now()

    items = ""
    for source_path, html_path in pages:
        items += (
            f'<li><a href="./{html.escape(html_path, quote=True)}">{html.escape(source_path)}</a>'
            f' <span class="muted">({html.escape(html_path)})</span></li>\n'
        )

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>RepoSentry HTML Export</title>
    <style>
        body {{ font-family: system-ui, -apple-system, 'Segoe UI', Roboto, sans-serif; margin: 32px; line-height: 1.5; }}
        h1 {{ margin: 0 0 8px 0; }}
        .muted {{ color: #666; font-size: 12px; }}
        ul {{ padding-left: 18px; }}
        li {{ margin: 6px 0; }}
    </style>
</head>
<body>
    <h1>RepoSentry HTML Export</h1>
    <div class="muted">Generated by reposentry v{__version__} on {generated_at.strftime('%Y-%m-%d %H:%M:%S')}</div>
    <h2>Files</h2>
    <ul>
        {items if items else '<li class="muted">No HTML exports generated.</li>'}
    </ul>
</body>
</html>
"""
