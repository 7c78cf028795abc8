"""PDF text extractor — page-ordered plain text via PyMuPDF."""

import asyncio
import logging

from docqa.application.interfaces.text_extractor import TextExtractionResult, TextExtractor
from docqa.domain.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class PdfTextExtractor(TextExtractor):
    """Infrastructure adapter that extracts the text layer of a PDF.

    Pages are joined in document order with a blank line between them.
    Pages without a text layer (scans) are skipped.
    """

    async def extract(self, data: bytes) -> TextExtractionResult:
        """Extract text from PDF bytes off the event loop."""
        result = await asyncio.to_thread(self._extract_sync, data)
        logger.info(
            "Extracted %d characters from %d page(s)",
            len(result.text),
            result.page_count or 0,
        )
        return result

    def _extract_sync(self, data: bytes) -> TextExtractionResult:
        import fitz  # PyMuPDF

        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as e:
            raise InvalidInputError(f"Could not parse PDF: {e}") from e

        pages: list[str] = []
        try:
            if doc.needs_pass:
                raise InvalidInputError("Could not parse PDF: document is encrypted")
            page_count = doc.page_count
            if page_count == 0:
                raise InvalidInputError("Could not parse PDF: document has no pages")
            for page_num, page in enumerate(doc):
                text = page.get_text("text")
                if text.strip():
                    pages.append(text)
                else:
                    logger.debug("Page %d has no text layer", page_num + 1)
        except (RuntimeError, ValueError) as e:
            raise InvalidInputError(f"Could not parse PDF: {e}") from e
        finally:
            doc.close()

        if not pages:
            logger.warning("PDF has no extractable text (%d pages)", page_count)

        return TextExtractionResult(text="\n\n".join(pages), page_count=page_count)
