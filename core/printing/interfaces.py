"""
Interfaces for the Printing Framework

Defines the contract between the render adapter and rendering engines.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from core.services.reporting.layout import DocumentLayout


class IPdfRenderer(ABC):
    """
    Interface for PDF rendering engines.

    Implementations turn a layout tree into an asynchronous sequence of PDF
    byte chunks. The sequence ends when the document is complete; a failure
    at any point is raised from the iterator.
    """

    @abstractmethod
    def stream(self, layout: DocumentLayout) -> AsyncIterator[bytes]:
        """
        Render a layout to PDF.

        Args:
            layout: Fully built document layout

        Returns:
            Async iterator over PDF byte chunks in document order
        """
        pass
