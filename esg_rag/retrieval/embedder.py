"""Query embeddings through the OpenAI embeddings API."""

from __future__ import annotations

from typing import List

from openai import AsyncOpenAI


class OpenAIEmbedder:
    """Embeds query text with the same model used to build the vector index."""

    def __init__(self, client: AsyncOpenAI, model: str) -> None:
        self.client = client
        self.model = model

    async def embed(self, text: str) -> List[float]:
        response = await self.client.embeddings.create(model=self.model, input=[text])
        return list(response.data[0].embedding)
