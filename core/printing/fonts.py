"""
Font registration for the ReportLab renderer.

Documents use one four-variant font family (normal, bold, italic, bold-italic)
loaded from TrueType files at startup. Missing files are a configuration
problem, reported once as a warning; rendering then falls back to the
built-in Helvetica family.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from django.conf import settings
from reportlab.lib.fonts import addMapping
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont


logger = logging.getLogger(__name__)

FONT_VARIANTS = ('normal', 'bold', 'italic', 'bolditalic')


@dataclass(frozen=True)
class FontSet:
    """ReportLab font names for each variant of a family"""

    family: str
    normal: str
    bold: str
    italic: str
    bolditalic: str

    def resolve(self, bold: bool = False, italics: bool = False) -> str:
        if bold and italics:
            return self.bolditalic
        if bold:
            return self.bold
        if italics:
            return self.italic
        return self.normal


HELVETICA = FontSet(
    family='Helvetica',
    normal='Helvetica',
    bold='Helvetica-Bold',
    italic='Helvetica-Oblique',
    bolditalic='Helvetica-BoldOblique',
)

_font_set: Optional[FontSet] = None


def find_missing_fonts(paths: dict) -> dict[str, Optional[Path]]:
    """
    Map each variant without a usable font file to its configured path.

    Variants missing from ``paths`` map to None.
    """
    missing = {}
    for variant in FONT_VARIANTS:
        configured = paths.get(variant)
        path = Path(configured) if configured else None
        if path is None or not path.is_file():
            missing[variant] = path
    return missing


def register_font_family(paths: Optional[dict] = None, family: str = 'Roboto') -> FontSet:
    """
    Register a TrueType font family with ReportLab.

    Args:
        paths: Mapping of variant ('normal', 'bold', 'italic', 'bolditalic')
            to a .ttf path (defaults to the DOCVAULT_FONTS setting)
        family: Family name to register under

    Returns:
        The registered FontSet, or the Helvetica family if any file is missing
    """
    paths = (paths if paths is not None else getattr(settings, 'DOCVAULT_FONTS', None)) or {}

    missing = find_missing_fonts(paths)
    if missing:
        for variant, path in missing.items():
            problem = f"not found: {path}" if path else "not configured"
            logger.warning(
                f"Font file for {variant!r} {problem}. Add the {family} .ttf files to the fonts "
                f"directory (DOCVAULT_FONTS_DIR); using {HELVETICA.family} meanwhile."
            )
        return HELVETICA

    names = {variant: family if variant == 'normal' else f"{family}-{variant}" for variant in FONT_VARIANTS}
    try:
        for variant in FONT_VARIANTS:
            pdfmetrics.registerFont(TTFont(names[variant], str(paths[variant])))
    except Exception as e:
        logger.warning(f"Could not register font family {family}: {e}; using {HELVETICA.family}")
        return HELVETICA

    addMapping(family, 0, 0, names['normal'])
    addMapping(family, 1, 0, names['bold'])
    addMapping(family, 0, 1, names['italic'])
    addMapping(family, 1, 1, names['bolditalic'])

    logger.info(f"Registered font family {family}")
    return FontSet(family=family, **names)


def load_fonts() -> FontSet:
    """Register the configured font family once and cache the result"""
    global _font_set
    if _font_set is None:
        _font_set = register_font_family()
    return _font_set
