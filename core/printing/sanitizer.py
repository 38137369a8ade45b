"""
Text Sanitizer for the Printing Framework

ReportLab paragraphs parse a small XML-like markup language. User supplied
text is cleaned before it reaches a paragraph so that stray '<' or '&'
characters cannot break the build or inject markup.
"""

import logging

import bleach


logger = logging.getLogger(__name__)


# Inline tags ReportLab understands and that are harmless in user text
ALLOWED_TAGS = ['b', 'i', 'u', 'strong', 'em']


def sanitize_text(text: str) -> str:
    """
    Convert plain user text into safe paragraph markup.

    Allowed inline tags are kept, every other tag is stripped, special
    characters are escaped and line breaks become <br/>.

    Args:
        text: Raw text (may be empty)

    Returns:
        Markup string for a ReportLab Paragraph
    """
    if not text:
        return ''

    clean = bleach.clean(
        text,
        tags=ALLOWED_TAGS,
        attributes={},
        strip=True,
    )
    # ReportLab only knows <b>/<i>
    clean = (
        clean.replace('<strong>', '<b>').replace('</strong>', '</b>')
        .replace('<em>', '<i>').replace('</em>', '</i>')
    )
    lines = clean.replace('\r\n', '\n').replace('\r', '\n').split('\n')
    return '<br/>'.join(lines)
