import re
from typing import Optional

from bs4 import BeautifulSoup

STOCK_MARKER = "Stock:"

_NON_DIGITS = re.compile(r"\D")


def parse_stock_text(text: Optional[str]) -> int:
    """Parse a stock count out of free text.

    Every non-digit character is removed before parsing, so
    "Stock: 1,200" gives 1200. Text with no digits at all gives 0.
    """
    digits = _NON_DIGITS.sub("", text or "")
    if not digits:
        return 0
    return int(digits)


def extract_stock_quantity(soup: BeautifulSoup) -> int:
    """Return the stock count shown on a rendered product detail page.

    Looks at the first paragraph containing "Stock:". Pages without one
    report a stock of 0.
    """
    for paragraph in soup.find_all("p"):
        text = paragraph.get_text()
        if STOCK_MARKER in text:
            return parse_stock_text(text)
    return 0
