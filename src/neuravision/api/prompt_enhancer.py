"""Prompt enhancement through the Gemini text API.

The enhance-prompt endpoint embeds the user's prompt in a fixed instruction
template, sends it to Gemini, and returns the model's rewrite.  This module
owns the template and the client call so the route handler only deals with
HTTP concerns.

Usage
-----
::

    from neuravision.api.prompt_enhancer import PromptEnhancer
    from neuravision.core.config import config

    enhancer = PromptEnhancer.from_config(config)
    if enhancer is not None:
        text = await enhancer.enhance("a cat on a roof")
"""

from __future__ import annotations

import logging

from google import genai

from neuravision.api.errors import UpstreamServiceError
from neuravision.core.config import NeuravisionConfig

logger = logging.getLogger(__name__)

ENHANCEMENT_TEMPLATE = """You are an expert AI image prompt engineer. Your task is to enhance and improve image generation prompts to make them more detailed, creative, and effective for AI image generation.

Given the basic prompt: "{prompt}"

Please enhance this prompt by:
1. Adding specific visual details (lighting, colors, composition)
2. Including artistic style information if appropriate
3. Adding technical photography/art terms that improve image quality
4. Maintaining the original intent while making it more descriptive
5. Keeping it concise but detailed (aim for 1-2 sentences)

Return only the enhanced prompt, nothing else."""


def build_enhancement_prompt(prompt: str) -> str:
    """Embed *prompt* in the enhancement instruction template."""
    return ENHANCEMENT_TEMPLATE.format(prompt=prompt)


class PromptEnhancer:
    """Rewrite image prompts with a Gemini model.

    Args:
        api_key: Google API key.
        model: Gemini model name, e.g. ``"gemini-2.5-flash"``.
        client: Pre-built ``genai.Client``.  Built from *api_key* when omitted.
    """

    def __init__(self, api_key: str, model: str, client: genai.Client | None = None):
        self.model = model
        self._client = client or genai.Client(api_key=api_key)

    @classmethod
    def from_config(cls, cfg: NeuravisionConfig) -> PromptEnhancer | None:
        """Build an enhancer from configuration, or ``None`` without an API key."""
        if not cfg.ai_enabled:
            logger.warning(
                "No Google API key found in environment variables. AI features will be disabled."
            )
            return None
        return cls(api_key=cfg.google_api_key, model=cfg.enhancement_model)

    async def enhance(self, prompt: str) -> str:
        """Return an enhanced version of *prompt*.

        Falls back to *prompt* unchanged when the model returns no text.

        Raises:
            UpstreamServiceError: If the Gemini call fails.
        """
        try:
            response = await self._client.aio.models.generate_content(
                model=self.model,
                contents=build_enhancement_prompt(prompt),
            )
        except Exception as e:
            logger.error(f"Error enhancing prompt: {e}")
            raise UpstreamServiceError("Failed to enhance prompt", details=str(e)) from e

        enhanced = (response.text or "").strip()
        if not enhanced:
            logger.info("Gemini returned no text; keeping the original prompt")
            return prompt
        return enhanced
