"""Splits text into fixed-size chunks for per-chunk classifier scoring."""
from textcheck.core.logging import get_logger
from textcheck.dtos.detection_dto import ChunkDTO

logger = get_logger(__name__)


def split_text_into_chunks(text: str, target_len: int, max_chunks: int) -> list[ChunkDTO]:
    """Split text into consecutive, non-overlapping slices of ``target_len`` characters.

    Text no longer than ``target_len`` is returned as a single chunk. At most
    ``max_chunks`` chunks are produced; anything after the last one is not scored.
    """
    if len(text) <= target_len:
        return [ChunkDTO(offset=0, text=text)]

    chunks: list[ChunkDTO] = []
    for offset in range(0, len(text), target_len):
        if len(chunks) >= max_chunks:
            break
        chunks.append(ChunkDTO(offset=offset, text=text[offset:offset + target_len]))

    covered = chunks[-1].offset + len(chunks[-1].text)
    if covered < len(text):
        logger.debug(
            "chunking_truncated_text",
            text_length=len(text),
            dropped_chars=len(text) - covered,
            max_chunks=max_chunks,
        )

    return chunks
