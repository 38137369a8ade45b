"""
Document Styles

Named style sheets for the two document shapes. Styles are renderer-agnostic;
sizes and margins are in points.
"""

from .layout import Style, StyleSheet


def get_document_styles() -> StyleSheet:
    """
    Get styles for the generic document.

    Returns:
        Dictionary of Style objects keyed by style name
    """
    return {
        'header': Style(font_size=18, bold=True, margin=(0, 0, 0, 10)),
        'subheader': Style(font_size=14, bold=True, margin=(0, 10, 0, 5)),
        'body': Style(font_size=10, margin=(0, 0, 0, 10)),
        'tableHeader': Style(font_size=10, bold=True, color='#000000'),
        'caption': Style(font_size=8, italics=True, color='#666666', alignment='center'),
        'footer': Style(font_size=8, alignment='center', color='#666666'),
    }


def get_invoice_styles() -> StyleSheet:
    """
    Get styles for invoices.

    Returns:
        Dictionary of Style objects keyed by style name
    """
    return {
        'header': Style(font_size=20, bold=True, margin=(0, 0, 0, 10)),
        'invoiceTitle': Style(font_size=28, bold=True, alignment='right'),
        'subheader': Style(font_size=14, bold=True, margin=(0, 10, 0, 5)),
        'subheaderRight': Style(font_size=12, bold=True, alignment='right', margin=(0, 0, 0, 2)),
        'textRight': Style(font_size=10, alignment='right', margin=(0, 0, 0, 2)),
        'tableHeader': Style(font_size=10, bold=True, color='#000000'),
        'tableCell': Style(font_size=10),
        'totalsLabel': Style(font_size=10, alignment='right', margin=(0, 2, 5, 2)),
        'totalsValue': Style(font_size=10, alignment='right', margin=(0, 2, 0, 2)),
        'totalsLabelBold': Style(font_size=11, bold=True, alignment='right', margin=(0, 5, 5, 5)),
        'totalsValueBold': Style(font_size=11, bold=True, alignment='right', margin=(0, 5, 0, 5)),
        'notesText': Style(font_size=9, italics=True),
        'footer': Style(font_size=8, alignment='center', margin=(0, 10, 0, 0)),
    }
