"""Text chunker — splits document text into overlapping, bounded-size segments."""

from docqa.domain.exceptions import EmptyInputError

_DEFAULT_CHUNK_SIZE = 2000
_DEFAULT_CHUNK_OVERLAP = 300

# Preferred break points, strongest first.
_SEPARATORS = ("\n\n", "\n", ". ", " ")


class TextChunker:
    """Splits text into chunks of at most ``chunk_size`` characters.

    Chunk *i+1* starts exactly ``chunk_overlap`` characters before chunk *i*
    ends, so dropping the first ``chunk_overlap`` characters of every chunk
    after the first and concatenating gives back the original text. Chunks
    are raw substrings; whitespace is never stripped.

    Chunk ends fall on the strongest separator available inside the window
    (paragraph, line, sentence, word). A window without any separator is cut
    at ``chunk_size``.
    """

    def __init__(
        self,
        chunk_size: int = _DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = _DEFAULT_CHUNK_OVERLAP,
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be positive")
        if not 0 <= chunk_overlap < chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and smaller than chunk_size")
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split(self, text: str) -> list[str]:
        """Split ``text`` into ordered, overlapping chunks.

        Raises:
            EmptyInputError: If the text is empty or whitespace-only.
        """
        if not text or not text.strip():
            raise EmptyInputError()

        if len(text) <= self._chunk_size:
            return [text]

        chunks: list[str] = []
        start = 0
        while True:
            limit = start + self._chunk_size
            if limit >= len(text):
                chunks.append(text[start:])
                return chunks

            # The break must leave the chunk longer than the overlap so the
            # next chunk starts past this one's start.
            end = self._find_break(text, start + self._chunk_overlap + 1, limit)
            chunks.append(text[start:end])
            start = end - self._chunk_overlap

    @staticmethod
    def _find_break(text: str, low: int, high: int) -> int:
        """Return the end offset of the last strongest separator in ``text[low:high]``."""
        for sep in _SEPARATORS:
            idx = text.rfind(sep, low, high)
            if idx != -1:
                return idx + len(sep)
        return high
