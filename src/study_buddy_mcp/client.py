"""Gemini client pool and the single structured-output call used by analysis."""

from __future__ import annotations

import logging
import os

from google import genai
from google.genai import types

from .config import VALID_THINKING_LEVELS, get_config

logger = logging.getLogger(__name__)


def _resolve_thinking_level(value: str) -> str:
    level = value.strip().lower()
    if level not in VALID_THINKING_LEVELS:
        allowed = ", ".join(sorted(VALID_THINKING_LEVELS))
        raise ValueError(f"Invalid thinking level '{value}'. Allowed: {allowed}")
    return level


def _visible_text(response: types.GenerateContentResponse) -> str:
    """Join the non-thought text parts of the first candidate."""
    content = response.candidates[0].content if response.candidates else None
    texts = [p.text for p in (content.parts if content else None) or [] if p.text and not p.thought]
    return "\n".join(texts) if texts else (response.text or "")


class GeminiClient:
    """One ``genai.Client`` per API key, shared by every study session."""

    _clients: dict[str, genai.Client] = {}

    @classmethod
    def get(cls, api_key: str | None = None) -> genai.Client:
        key = api_key or get_config().gemini_api_key or os.getenv("GEMINI_API_KEY", "")
        if not key:
            raise ValueError("No Gemini API key — set GEMINI_API_KEY or pass api_key explicitly")
        if key not in cls._clients:
            cls._clients[key] = genai.Client(api_key=key)
            logger.info("Created Gemini client (key …%s)", key[-4:])
        return cls._clients[key]

    @classmethod
    async def generate(
        cls,
        contents: types.ContentListUnion,
        *,
        response_schema: dict | None = None,
        system_instruction: str | None = None,
    ) -> str:
        """Make one ``generate_content`` call and return the visible text.

        Model, thinking level and temperature come from the live config, so
        ``infra_configure`` changes apply to the next submit. Errors
        propagate unchanged; nothing is retried here.
        """
        cfg = get_config()
        config = types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(
                thinking_level=_resolve_thinking_level(cfg.default_thinking_level),
            ),
            temperature=cfg.default_temperature,
            system_instruction=system_instruction or None,
        )
        if response_schema:
            config.response_mime_type = "application/json"
            config.response_json_schema = response_schema

        response = await cls.get().aio.models.generate_content(
            model=cfg.default_model,
            contents=contents,
            config=config,
        )
        return _visible_text(response)

    @classmethod
    async def close_all(cls) -> int:
        """Close every pooled client at shutdown. Returns how many were closed."""
        closed = 0
        for client in list(cls._clients.values()):
            try:
                await client.aio.aclose()
                client.close()
            except Exception:
                logger.debug("Gemini client close failed", exc_info=True)
            closed += 1
        cls._clients.clear()
        logger.info("Closed %d Gemini client(s)", closed)
        return closed
