import html
import re

from formlet.log import get_logger

logger = get_logger(__name__)


def escape_text(text) -> str:
    return html.escape(str(text), quote=False)


def escape_attribute(value) -> str:
    return html.escape(str(value), quote=True)


def html_sanitize(html_string: str) -> str:
    """
    Performs HTML sanitization by removing potentially dangerous tags and attributes.

    Args:
        html_string: The HTML string to sanitize.
    """
    if not isinstance(html_string, str):
        try:
            html_string = str(html_string)
        except Exception:
            logger.warning("html_sanitize: input could not be converted to string, returning empty string")
            return ""

    # 1. Remove <script> tags and their content
    clean_html = re.sub(r'<script.*?>.*?</script>', '', html_string, flags=re.IGNORECASE | re.DOTALL)

    # 2. Remove common inline event handlers (on* attributes)
    clean_html = re.sub(r'\s+on\w+\s*=\s*("[^"]*"|\'[^\']*\'|[^\s>]+)', '', clean_html, flags=re.IGNORECASE)

    # 3. Remove javascript: links
    clean_html = re.sub(r'href\s*=\s*("|\')?\s*javascript:[^"\'>\s]+("|\')?', 'href="javascript:void(0)"', clean_html, flags=re.IGNORECASE)

    # 4. Remove potentially dangerous tags
    dangerous_tags = ['iframe', 'object', 'embed', 'form', 'base', 'link', 'meta']
    for tag in dangerous_tags:
        pattern = f'<{tag}.*?>.*?</{tag}>|<{tag}.*?/?>'
        clean_html = re.sub(pattern, '', clean_html, flags=re.IGNORECASE | re.DOTALL)

    # 5. Remove data: URLs (often used for XSS)
    clean_html = re.sub(r'(src|href)\s*=\s*("|\')?\s*data:[^"\'>\s]+("|\')?', r'\1="javascript:void(0)"', clean_html, flags=re.IGNORECASE)

    # 6. Sanitize style attributes to prevent CSS-based attacks
    clean_html = re.sub(r'style\s*=\s*("|\').*?(expression|javascript|behavior|eval|vbscript).*?("|\')', 'style=""', clean_html, flags=re.IGNORECASE)

    return clean_html
