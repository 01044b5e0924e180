"""Claude-backed requirement extraction.

Asks Claude for a <requirements_update> JSON block and merges it with the
engine's additive rules. Any failure falls back to keyword extraction so a
conversation never stalls on the model.
"""

import json
import logging
import os
import re
from dataclasses import dataclass
from typing import Optional

from anthropic import Anthropic

from backend.ai.prompts import build_extraction_messages
from lz_engine.requirements import (
    KeywordRequirementExtractor,
    RequirementExtractor,
    Requirements,
    apply_requirement_updates,
)

logger = logging.getLogger(__name__)

_UPDATE_BLOCK = re.compile(r"<requirements_update>\s*(.*?)\s*</requirements_update>", re.DOTALL)


@dataclass
class AgentConfig:
    model: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 800
    temperature: float = 0.1


class AnthropicRequirementExtractor(RequirementExtractor):
    name = "anthropic"

    def __init__(
        self,
        client: Optional[Anthropic] = None,
        config: Optional[AgentConfig] = None,
        fallback: Optional[RequirementExtractor] = None,
    ):
        self._client = client
        self.config = config or AgentConfig(model=os.getenv("ANTHROPIC_MODEL", AgentConfig.model))
        self.fallback = fallback or KeywordRequirementExtractor()

    def _get_client(self) -> Anthropic:
        if self._client is None:
            api_key = os.getenv("ANTHROPIC_API_KEY")
            if not api_key:
                raise RuntimeError("ANTHROPIC_API_KEY not configured")
            self._client = Anthropic(api_key=api_key)
        return self._client

    def extract(self, message: str, prior: Requirements) -> Requirements:
        try:
            updates = self._request_updates(message, prior)
        except Exception as e:
            logger.error(f"Claude requirement extraction failed, using keyword rules: {e}", exc_info=True)
            return self.fallback.extract(message, prior)

        requirements = prior.copy()
        for update in updates:
            apply_requirement_updates(requirements, update)
        return requirements

    def _request_updates(self, message: str, prior: Requirements) -> list[dict]:
        system, messages = build_extraction_messages(message, prior)
        response = self._get_client().messages.create(
            model=self.config.model,
            max_tokens=self.config.max_tokens,
            system=system,
            messages=messages,
            temperature=self.config.temperature,
        )
        text = response.content[0].text

        blocks = _UPDATE_BLOCK.findall(text)
        if not blocks:
            raise ValueError("response contained no <requirements_update> block")

        updates = []
        for block in blocks:
            parsed = json.loads(block)
            if not isinstance(parsed, dict):
                raise ValueError("requirements update is not a JSON object")
            updates.append(parsed)
        return updates


def build_extractor(kind: Optional[str] = None) -> RequirementExtractor:
    """Pick the extractor named by REQUIREMENT_EXTRACTOR (keyword by default)."""
    kind = (kind or os.getenv("REQUIREMENT_EXTRACTOR", "keyword")).lower()
    if kind == "anthropic":
        return AnthropicRequirementExtractor()
    if kind != "keyword":
        logger.warning("Unknown requirement extractor %r, using keyword rules", kind)
    return KeywordRequirementExtractor()
