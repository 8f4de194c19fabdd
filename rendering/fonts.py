"""Font registration for Korean text in reportlab output."""
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont

KOREAN_FONT = "HYSMyeongJo-Medium"
KOREAN_BOLD_FONT = "HYGothic-Medium"


def register_fonts() -> tuple[str, str]:
    """Register the built-in Korean CID fonts once; returns (body font, heading font)."""
    registered = pdfmetrics.getRegisteredFontNames()
    for name in (KOREAN_FONT, KOREAN_BOLD_FONT):
        if name not in registered:
            pdfmetrics.registerFont(UnicodeCIDFont(name))
    return KOREAN_FONT, KOREAN_BOLD_FONT
