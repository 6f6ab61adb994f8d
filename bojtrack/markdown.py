"""HTML to Markdown conversion for problem statements.

Keeps the formatting that matters in statements (exponents, subscripts,
emphasis, inline code, sample blocks, lists and images) and drops the
rest. Every node renders to its own string and parents join their
children's output, so the converter holds no state between calls.
"""

from bs4.element import Comment, NavigableString, PageElement, Tag

from .base import BOJ_BASE_URL

FENCE = "```"


def resolve_image_url(src: str, base_url: str = BOJ_BASE_URL) -> str:
    if src.startswith("/"):
        return f"{base_url}{src}"
    if src.startswith("http") or src.startswith("data:"):
        return src
    return f"{base_url}/{src}"


def _render_list(node: Tag) -> str:
    lines = []
    for li in node.find_all("li", recursive=False):
        content = html_to_markdown(li)
        if content:
            lines.append(f"- {content}\n")
    return "".join(lines) + "\n"


def _render_img(node: Tag) -> str:
    src = node.get("src")
    if not isinstance(src, str) or not src:
        return ""
    alt = node.get("alt")
    alt = alt if isinstance(alt, str) else ""
    return f"![{alt}]({resolve_image_url(src)})"


def _render_tag(node: Tag) -> str:
    name = node.name.lower()

    if name == "br":
        return "\n"
    if name in ("ul", "ol"):
        return _render_list(node)
    if name == "img":
        return _render_img(node)

    inner = html_to_markdown(node)
    if name == "sup":
        return f"^{inner}"
    if name == "sub":
        return f"<sub>{inner}</sub>"
    if name in ("strong", "b"):
        return f"**{inner}**"
    if name in ("em", "i"):
        return f"*{inner}*"
    if name == "code":
        return f"`{inner}`"
    if name == "p":
        return f"{inner}\n" if inner else ""
    if name == "div":
        return f"{inner}\n\n" if inner else ""
    if name == "pre":
        return f"\n{FENCE}\n{inner}\n{FENCE}\n\n" if inner else ""
    # span and anything unrecognised
    return inner


def _render(node: PageElement) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        text = str(node)
        return text if text.strip() else ""
    if isinstance(node, Tag):
        return _render_tag(node)
    return ""


def html_to_markdown(node: Tag | None) -> str:
    if node is None:
        return ""
    if not node.contents:
        return node.get_text().strip()
    return "".join(_render(child) for child in node.contents).strip()
