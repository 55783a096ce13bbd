"""
Azure OpenAI embedding service.

Supplies sentence embeddings for the sequence scorer's fallback path when no
trained readout model is available. Only used when SEQUENCE_EMBEDDING_ENABLED
is true and AZURE_OPENAI_KEY / AZURE_OPENAI_ENDPOINT are set.
"""

from typing import List, Optional, Sequence

from openai import AzureOpenAI

import config


class AzureEmbeddingService:
    """
    Service class for sentence embeddings from an Azure OpenAI deployment.

    Usage:
        service = get_embedding_service()
        vectors = service.embed(["first utterance", "second utterance"])
    """

    def __init__(self, client: Optional[AzureOpenAI] = None, deployment_name: Optional[str] = None):
        """Initialize the Azure OpenAI client (or use the one provided)."""
        self.client = client or AzureOpenAI(
            azure_endpoint=config.AZURE_OPENAI_ENDPOINT,
            api_key=config.AZURE_OPENAI_KEY,
            api_version=config.AZURE_OPENAI_API_VERSION,
            timeout=config.EMBEDDING_TIMEOUT_SECONDS,
            max_retries=config.EMBEDDING_MAX_RETRIES,
        )
        self.deployment_name = deployment_name or config.EMBEDDING_DEPLOYMENT_NAME

    def embed(self, sentences: Sequence[str]) -> List[List[float]]:
        """
        Embed sentences in one request.

        Args:
            sentences: Texts to embed; empty input returns [] without a request

        Returns:
            One vector per sentence, in input order

        Raises:
            Exception: If the API call fails
        """
        texts = [s if s.strip() else " " for s in sentences]
        if not texts:
            return []
        response = self.client.embeddings.create(model=self.deployment_name, input=texts)
        ordered = sorted(response.data, key=lambda d: d.index)
        return [list(d.embedding) for d in ordered]


_embedding_service: Optional[AzureEmbeddingService] = None


def get_embedding_service() -> AzureEmbeddingService:
    """Return the embedding service instance, creating it on first call (lazy init)."""
    global _embedding_service
    if _embedding_service is None:
        _embedding_service = AzureEmbeddingService()
    return _embedding_service
