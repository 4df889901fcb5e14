"""Character sources used by text-mode includes.

``DecodingReader`` turns a byte stream into characters incrementally and
``CountingReader`` tracks the line, column and offset of what has been read.
"""

import codecs
from typing import BinaryIO


class DecodingReader:
    """Incrementally decodes a binary stream.

    Multi-byte sequences split across reads are held back by the incremental
    decoder, so ``read`` only returns an empty string at end of input.
    """

    def __init__(self, stream: BinaryIO, encoding: str, chunk_size: int = 4096) -> None:
        self._stream = stream
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="strict")
        self._chunk_size = chunk_size
        self._pending = ""
        self._eof = False

    def read(self, size: int) -> str:
        """Read up to ``size`` characters.

        Raises:
            UnicodeDecodeError: If the input is not valid in the encoding
            OSError: If the underlying stream fails
        """
        while len(self._pending) < size and not self._eof:
            data = self._stream.read(self._chunk_size)
            if not data:
                self._eof = True
                self._pending += self._decoder.decode(b"", final=True)
            else:
                self._pending += self._decoder.decode(data)
        text, self._pending = self._pending[:size], self._pending[size:]
        return text

    def close(self) -> None:
        """Close the underlying stream."""
        self._stream.close()


class CountingReader:
    """Wraps a character source and tracks position.

    Lines and columns are 1-based and the offset is 0-based. A line feed
    starts a new line; every other character advances the column.
    """

    def __init__(self, source: DecodingReader) -> None:
        self._source = source
        self.line_number = 1
        self.column_number = 1
        self.character_offset = 0

    def read(self, size: int) -> str:
        """Read up to ``size`` characters, updating the position."""
        text = self._source.read(size)
        if text:
            self.character_offset += len(text)
            newlines = text.count("\n")
            if newlines:
                self.line_number += newlines
                self.column_number = len(text) - text.rfind("\n")
            else:
                self.column_number += len(text)
        return text

    def close(self) -> None:
        """Close the character source."""
        self._source.close()
