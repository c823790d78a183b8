# Generation backend: OpenAI Chat Completions.
# Exposes generate(messages, params) -> (text, meta); any non-success
# response is raised as UpstreamError carrying the upstream body.

import logging
from typing import List, Tuple, Dict, Any, Optional

import openai
from openai import OpenAI

from finalsay.errors import UpstreamError
from ..types import Message, ModelParams

logger = logging.getLogger(__name__)


class OpenAIClient:
    def __init__(self, api_key: str, model: str = "gpt-4o-mini", client: Optional[OpenAI] = None):
        self.model = model
        # no retries: a backend failure is terminal for the request
        self.client = client or OpenAI(api_key=api_key, max_retries=0)

    def generate(self, messages: List[Message], params: ModelParams) -> Tuple[str, Dict[str, Any]]:
        formatted = [{"role": m.role, "content": m.content} for m in messages]
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=formatted,
                temperature=params.temperature if params.temperature is not None else 0.7,
                max_tokens=params.max_tokens or 700,
            )
        except openai.APIStatusError as e:
            logger.error("OpenAI returned %s", e.status_code)
            raise UpstreamError("OpenAI error", detail=e.response.text) from e
        except openai.APIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise UpstreamError("OpenAI error", detail=str(e)) from e

        content = resp.choices[0].message.content if resp.choices else None
        meta = {"engine": "openai", "model": self.model}
        return (content or "").strip(), meta
