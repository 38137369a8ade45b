"""
Layout Tree

Renderer-agnostic description of a document: pages, header/footer generators,
content nodes and a named style sheet. Content nodes form a closed set
(Text, Table, Image, Columns, PageBreak, BulletList); renderers dispatch on
exactly these types.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Union

# (left, top, right, bottom) in points
Margin = tuple[float, float, float, float]

# Column width: points, '*' (take remaining space) or 'auto' (smaller share)
Width = Union[float, str]


@dataclass
class LayoutNode:
    """Base for all content nodes"""

    style: Optional[str] = None
    margin: Optional[Margin] = None


@dataclass
class Text(LayoutNode):
    """A paragraph; ``text`` may contain line breaks"""

    text: str = ''
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    italics: Optional[bool] = None
    alignment: Optional[str] = None


@dataclass
class Image(LayoutNode):
    """Inline image given as a data URI ('data:image/png;base64,...')"""

    data_uri: str = ''
    width: Optional[float] = None
    height: Optional[float] = None
    alignment: Optional[str] = None


@dataclass
class Table(LayoutNode):
    """
    Table with a fixed header row and ordered body rows.

    ``layout`` names a border preset: 'lightHorizontalLines', 'noBorders'
    or 'grid'.
    """

    header: list[Text] = field(default_factory=list)
    body: list[list[Text]] = field(default_factory=list)
    widths: list[Width] = field(default_factory=list)
    layout: str = 'lightHorizontalLines'

    @property
    def header_rows(self) -> int:
        return 1 if self.header else 0

    @property
    def rows(self) -> list[list[Text]]:
        return ([self.header] if self.header else []) + self.body


@dataclass
class Column:
    """One column of a Columns node"""

    content: list[LayoutNode] = field(default_factory=list)
    width: Width = '*'


@dataclass
class Columns(LayoutNode):
    """Side-by-side columns"""

    columns: list[Column] = field(default_factory=list)


@dataclass
class PageBreak(LayoutNode):
    """Forces the following content onto a new page"""


@dataclass
class BulletList(LayoutNode):
    """Bulleted list; items are strings or nested lists"""

    items: list[Union[str, 'BulletList']] = field(default_factory=list)


@dataclass
class Style:
    """Named text style referenced by nodes"""

    font_size: Optional[float] = None
    bold: bool = False
    italics: bool = False
    alignment: str = 'left'
    color: Optional[str] = None
    margin: Optional[Margin] = None


StyleSheet = dict[str, Style]

# (current_page, page_count, page_size) -> nodes drawn in the header or footer area
PageDecorator = Callable[[int, int, tuple[float, float]], list[LayoutNode]]


@dataclass
class DocumentLayout:
    """Complete layout of one document, ready to be rendered"""

    title: str
    author: str
    content: list[LayoutNode] = field(default_factory=list)
    styles: StyleSheet = field(default_factory=dict)
    default_style: Style = field(default_factory=lambda: Style(font_size=10))
    page_size: str = 'A4'
    page_margins: Margin = (40, 60, 40, 60)
    header: Optional[PageDecorator] = None
    header_margin: Margin = (40, 30, 40, 10)
    footer: Optional[PageDecorator] = None
    footer_margin: Margin = (40, 10, 40, 20)


CONTENT_NODE_TYPES = (Text, Table, Image, Columns, PageBreak, BulletList)
