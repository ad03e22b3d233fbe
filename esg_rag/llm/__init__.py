"""LLM integration helpers."""

from .answer_generator import AnswerGenerator
from .openai_client import OpenAIChatClient
from .query_generator import QueryGenerator

__all__ = ["AnswerGenerator", "OpenAIChatClient", "QueryGenerator"]
