"""
Embedding Index - obtains and caches block embeddings.

Embeddings are requested only at submission boundaries and memoized by the
content snapshot they were computed from. Provider failures never escape:
the block simply stays unembedded and drops out of similarity computation.
"""

from collections import OrderedDict

from notecoach.core.block_store import BlockStore
from notecoach.core.embeddings.base import EmbeddingProvider
from notecoach.models.block import Block, compute_content_hash
from notecoach.utils.exceptions import ProviderError, ValidationError
from notecoach.utils.logger import get_logger

logger = get_logger(__name__)


class EmbeddingIndex:
    """
    Fail-open embedding cache in front of an EmbeddingProvider.

    Two caches are kept:
    - per block, on the block itself (``embedding`` + ``embedded_hash``)
    - per text fingerprint, a bounded LRU used for free-text queries
    """

    def __init__(self, embedder: EmbeddingProvider, store: BlockStore, cache_size: int = 256):
        """
        Initialize embedding index.

        Args:
            embedder: Embedding provider
            store: Block store the embeddings are attached to
            cache_size: Maximum number of free-text embeddings kept
        """
        self.embedder = embedder
        self.store = store
        self.cache_size = cache_size
        self._text_cache: OrderedDict[str, list[float]] = OrderedDict()

    async def embed_block(self, block: Block, content: str | None = None) -> list[float] | None:
        """
        Embed a content snapshot of a block and attach the result.

        Returns the cached vector when the block was already embedded from the
        same content. The vector is attached only if the block still holds the
        embedded snapshot when the provider returns.

        Args:
            block: Block to embed
            content: Snapshot to embed (defaults to the block's current content)

        Returns:
            The embedding, or None if the provider failed
        """
        text = block.content if content is None else content
        content_hash = compute_content_hash(text)
        if block.embedding is not None and block.embedded_hash == content_hash:
            return block.embedding

        embedding = await self.embed_text(text)
        if embedding is None:
            return None

        if not self.store.attach_embedding(block.id, embedding, content_hash):
            logger.debug(
                "Block changed while embedding; result not attached",
                extra={"block_id": block.id},
            )
        return embedding

    async def embed_text(self, text: str) -> list[float] | None:
        """
        Embed free text, memoized by content fingerprint.

        Args:
            text: Text to embed

        Returns:
            The embedding, or None if the provider failed or the text is blank
        """
        key = compute_content_hash(text)
        cached = self._text_cache.get(key)
        if cached is not None:
            self._text_cache.move_to_end(key)
            return cached

        try:
            embedding = await self.embedder.embed(text)
        except (ProviderError, ValidationError) as e:
            logger.warning(
                "Embedding unavailable",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return None

        self._text_cache[key] = embedding
        if len(self._text_cache) > self.cache_size:
            self._text_cache.popitem(last=False)
        return embedding
