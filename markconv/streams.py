"""
Stream adapters shared by every converter.

The converters work on whole documents, so both adapters buffer the entire
input, convert once and write the result once. A reader may yield ``str`` or
``bytes``; bytes are decoded incrementally so a multi-byte character split
across two chunks survives, and the output is written back as bytes.

Cancellation of ``convert_stream_async`` is plain asyncio task cancellation:
it can only take effect at an ``await`` (a chunk read, the write or the
drain), never in the middle of a conversion, and nothing is written before
the whole input has been read.
"""

import codecs
import inspect
import logging

logger = logging.getLogger(__name__)


class _ChunkBuffer:
    """Collects chunks of ``str`` or ``bytes`` into one string."""

    def __init__(self, encoding):
        self.encoding = encoding
        self.parts = []
        self.is_binary = False
        self._decoder = None

    def add(self, chunk):
        if isinstance(chunk, (bytes, bytearray)):
            if self._decoder is None:
                self._decoder = codecs.getincrementaldecoder(self.encoding)(errors='replace')
                self.is_binary = True
            self.parts.append(self._decoder.decode(bytes(chunk)))
        else:
            self.parts.append(chunk)

    def text(self):
        if self._decoder is not None:
            self.parts.append(self._decoder.decode(b"", final=True))
        return "".join(self.parts)

    def encode(self, text):
        return text.encode(self.encoding) if self.is_binary else text


class StreamConverterMixin:
    """
    Adds ``convert_stream`` / ``convert_stream_async`` to a converter.

    The host class must provide ``convert(text)`` and ``self.config``.
    """

    def convert_stream(self, reader, writer):
        """
        Read ``reader`` to exhaustion, convert, and write the result to
        ``writer`` in a single ``write`` call.
        """
        buffer = _ChunkBuffer(self.config.STREAM_ENCODING)
        while True:
            chunk = reader.read(self.config.STREAM_CHUNK_SIZE)
            if not chunk:
                break
            buffer.add(chunk)

        text = buffer.text()
        logger.debug("%s: read %d characters from stream", type(self).__name__, len(text))
        writer.write(buffer.encode(self.convert(text)))

    async def convert_stream_async(self, reader, writer):
        """
        Async variant for ``asyncio.StreamReader``-like readers.

        ``reader.read`` and ``writer.write`` may be plain or coroutine
        functions; ``writer.drain()`` is awaited when the writer has it.
        """
        buffer = _ChunkBuffer(self.config.STREAM_ENCODING)
        while True:
            chunk = await _maybe_await(reader.read(self.config.STREAM_CHUNK_SIZE))
            if not chunk:
                break
            buffer.add(chunk)

        text = buffer.text()
        logger.debug("%s: read %d characters from async stream", type(self).__name__, len(text))
        await _maybe_await(writer.write(buffer.encode(self.convert(text))))

        drain = getattr(writer, 'drain', None)
        if drain is not None:
            await _maybe_await(drain())


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value
