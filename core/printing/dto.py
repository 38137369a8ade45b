"""
Data Transfer Objects for the Printing Framework
"""

from dataclasses import dataclass


@dataclass
class PdfResult:
    """
    Complete rendered document.

    Only ever built from a fully consumed render stream, so ``pdf_bytes``
    is never a partial file.
    """

    pdf_bytes: bytes
    filename: str
    content_type: str = "application/pdf"

    def __len__(self) -> int:
        return len(self.pdf_bytes)

    def content_disposition(self, *, inline: bool = True) -> str:
        """Content-Disposition header value ('inline' for previews, else 'attachment')"""
        kind = 'inline' if inline else 'attachment'
        return f'{kind}; filename="{self.filename}"'
