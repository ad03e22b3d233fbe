"""Glue module that turns retrieved sources into a cited answer via OpenAI."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

import tiktoken

from esg_rag.llm.openai_client import OpenAIChatClient
from esg_rag.llm.prompts import SYSTEM_PROMPT, build_user_prompt
from esg_rag.models.search import SourcedDocument
from esg_rag.utils.tokenization import count_tokens

logger = logging.getLogger(__name__)


def select_within_budget(
    documents: Iterable[SourcedDocument],
    max_tokens: int,
    encoding: Optional[tiktoken.Encoding],
) -> List[SourcedDocument]:
    """Keep documents in order until the token budget runs out.

    The first document is always kept so an oversized top hit still grounds
    the answer.
    """
    selected: List[SourcedDocument] = []
    tokens_left = max_tokens
    for document in documents:
        document_tokens = count_tokens(document.content, encoding)
        if document_tokens > tokens_left and selected:
            break
        tokens_left = max(tokens_left - document_tokens, 0)
        selected.append(document)
    return selected


class AnswerGenerator:
    """Generates source-grounded answers."""

    def __init__(
        self,
        client: OpenAIChatClient,
        max_evidence_tokens: int,
        encoding: Optional[tiktoken.Encoding] = None,
    ) -> None:
        self.client = client
        self.max_evidence_tokens = max_evidence_tokens
        self.encoding = encoding

    async def generate(
        self, question: str, documents: Iterable[SourcedDocument]
    ) -> tuple[str, List[SourcedDocument]]:
        """Return the answer and the sources actually placed in the prompt."""
        selected = select_within_budget(documents, self.max_evidence_tokens, self.encoding)
        if not selected:
            return "No relevant sources were found for this question.", []
        logger.info("Answering with %d sources", len(selected))
        prompt = build_user_prompt(question, selected)
        answer = await self.client.complete(SYSTEM_PROMPT, prompt)
        return answer.strip(), selected
