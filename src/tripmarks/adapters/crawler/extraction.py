"""Pull the main readable text out of a blog or article page."""

from __future__ import annotations

from bs4 import BeautifulSoup

# page chrome that never carries place mentions
REMOVE_SELECTORS: tuple[str, ...] = (
    "script",
    "style",
    "noscript",
    "iframe",
    "nav",
    "header",
    "footer",
    ".sidebar",
    ".comments",
    ".comment",
    ".advertisement",
    ".ad",
    ".ads",
    ".related-posts",
    ".related",
    ".share",
    ".social",
    '[role="navigation"]',
    '[role="banner"]',
    '[role="contentinfo"]',
)

# most specific first; the first selector that matches wins
CONTENT_SELECTORS: tuple[str, ...] = (
    # Naver blog
    ".se-main-container",
    ".post-view",
    "#postViewArea",
    ".se_component_wrap",
    # Tistory
    ".article-view",
    ".entry-content",
    ".tt_article_useless_p_margin",
    ".contents_style",
    # generic articles
    "article",
    '[role="main"]',
    ".post-content",
    ".content",
    ".post-body",
    ".article-content",
    ".blog-post",
    ".entry",
    "main",
    "#content",
    ".container",
    "body",
)


def page_title(soup: BeautifulSoup) -> str | None:
    og_title = soup.select_one('meta[property="og:title"]')
    if og_title is not None:
        content = og_title.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()
    if soup.title is not None:
        title = soup.title.get_text(strip=True)
        if title:
            return title
    return None


def main_text(soup: BeautifulSoup) -> str:
    # matches come in document order, so nested ones may already be gone
    for element in soup.select(", ".join(REMOVE_SELECTORS)):
        if not element.decomposed:
            element.decompose()

    for selector in CONTENT_SELECTORS:
        elements = soup.select(selector)
        if elements:
            text = " ".join(element.get_text(" ") for element in elements)
            return " ".join(text.split())
    return ""


def extract_page_text(html: str, *, max_length: int) -> tuple[str, str | None]:
    """Return the collapsed main text (truncated to ``max_length``) and the page title."""

    soup = BeautifulSoup(html, "html.parser")
    title = page_title(soup)
    text = main_text(soup)
    if len(text) > max_length:
        text = f"{text[:max_length]}..."
    return text, title
