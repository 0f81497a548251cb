# seo_scout/anchor/generator.py
"""
AnchorTextGenerator: short internal-link anchor text from a page URL.

The URL slug is derived locally (:func:`seo_scout.utils.derive_slug`) and
embedded in a fixed prompt; the model is treated as a black-box text
transform. The reply is trimmed and capped at ``max_words`` words.
"""
from __future__ import annotations

from typing import Optional

from openai import APIError, AsyncOpenAI

from seo_scout.config import LLMConfig
from seo_scout.errors import ServerMisconfigured, UpstreamUnavailable
from seo_scout.logger import logger
from seo_scout.utils import derive_slug

PROMPT_TEMPLATE = (
    "You are an SEO expert. Suggest a short, natural-sounding anchor text for an internal link.\n"
    "\n"
    "Destination page slug: \"{slug}\"\n"
    "Destination page title: \"{title}\"\n"
    "Linking from: {from_url}\n"
    "\n"
    "Rules:\n"
    "- The anchor text must accurately reflect the destination.\n"
    "- It should feel natural and be no more than {max_words} words.\n"
    "- Do not describe the source page.\n"
    "- Do not use generic terms like \"click here\".\n"
    "- Return the anchor text only, without quotes or markdown."
)

_QUOTES = "\"'`«»“”‘’"


def build_prompt(slug: str, page_title: Optional[str] = None, from_url: Optional[str] = None, max_words: int = 6) -> str:
    return PROMPT_TEMPLATE.format(
        slug=slug,
        title=page_title or "",
        from_url=from_url or "(not specified)",
        max_words=max_words,
    )


def clean_anchor(text: str, max_words: int = 6) -> str:
    """Trim whitespace and wrapping quotes, keep at most ``max_words`` words."""
    words = text.strip().strip(_QUOTES).split()
    return " ".join(words[:max_words]).strip(_QUOTES)


class AnchorTextGenerator:
    """Asks a chat-completion model for anchor text describing a page."""

    def __init__(self, config: LLMConfig, client: Optional[AsyncOpenAI] = None) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.config.api_key:
                raise ServerMisconfigured("Language model API key is not configured")
            self._client = AsyncOpenAI(
                api_key=self.config.api_key,
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                max_retries=0,
            )
        return self._client

    async def __aenter__(self) -> AnchorTextGenerator:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        # an injected client belongs to the caller
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def generate_anchor(
        self,
        page_url: str,
        page_title: Optional[str] = None,
        from_url: Optional[str] = None,
    ) -> str:
        slug = derive_slug(page_url)
        prompt = build_prompt(slug, page_title, from_url, self.config.max_words)
        logger.debug("Requesting anchor text for %s (slug=%r)", page_url, slug)

        try:
            response = await self.client.chat.completions.create(
                model=self.config.model,
                messages=[{"role": "user", "content": prompt}],
            )
        except APIError as exc:
            logger.error("Anchor text request failed for %s: %s", page_url, exc)
            raise UpstreamUnavailable(f"Language model call failed: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        anchor = clean_anchor(content or "", self.config.max_words)
        if not anchor:
            raise UpstreamUnavailable("Language model returned an empty anchor")
        return anchor


__all__ = ["AnchorTextGenerator", "PROMPT_TEMPLATE", "build_prompt", "clean_anchor"]
