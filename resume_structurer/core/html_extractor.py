from bs4 import BeautifulSoup

from resume_structurer.core.errors import EmptyDocumentError
from resume_structurer.core.text_normalization import sanitize_encoding

# Tags whose text is never resume content
SKIP_TAGS = ("script", "style", "noscript", "template", "head")


def extract_html_text(html_bytes: bytes) -> str:
    """Visible text of an HTML resume, one text node per line."""
    soup = BeautifulSoup(sanitize_encoding(html_bytes), "html.parser")
    for tag in soup(SKIP_TAGS):
        tag.decompose()

    text = soup.get_text("\n", strip=True)
    if not text:
        raise EmptyDocumentError("No visible text found in HTML")
    return text
