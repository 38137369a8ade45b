"""
Page Decorations

Header and footer generators. Each generator is a pure function of
(current_page, page_count, page_size) returning layout nodes; the renderer
calls it once per page after pagination is known.
"""

from .layout import Column, Columns, Image, LayoutNode, PageDecorator, Text


def page_number_footer(current_page: int, page_count: int, page_size: tuple[float, float]) -> list[LayoutNode]:
    """Footer with 'Page X of Y' centered"""
    return [Text(text=f"Page {current_page} of {page_count}", style='footer', alignment='center')]


def create_header(title: str, logo_data_uri: str | None = None, company_name: str = 'Your Company') -> PageDecorator:
    """
    Create a header generator with a company mark on the left and a title on the right.

    Args:
        title: Title drawn right-aligned (e.g., 'INVOICE')
        logo_data_uri: Optional logo image; a text mark is used without it
        company_name: Text mark used when no logo is available

    Returns:
        Header generator
    """
    def header(current_page: int, page_count: int, page_size: tuple[float, float]) -> list[LayoutNode]:
        if logo_data_uri:
            mark = Image(data_uri=logo_data_uri, width=50, margin=(0, 0, 20, 0))
        else:
            mark = Text(text=company_name, style='header', margin=(0, 0, 20, 0))
        return [
            Columns(columns=[
                Column(content=[mark], width='auto'),
                Column(content=[Text(text=title, style='invoiceTitle', alignment='right')], width='*'),
            ])
        ]

    return header


def create_title_header(title: str) -> PageDecorator:
    """Header with the document title on the left, repeated from page 2 on"""
    def header(current_page: int, page_count: int, page_size: tuple[float, float]) -> list[LayoutNode]:
        if current_page == 1:
            return []
        return [Text(text=title, style='caption', alignment='left')]

    return header
