"""Clothing Analyzer - turns a reference photo into editable clothing descriptions."""

import json
import logging
from typing import Any

from .images import sniff_mime_type

logger = logging.getLogger(__name__)


ANALYSIS_PROMPT = """Identify every distinct clothing item worn or shown in this image.

For each item write one self-contained description that an image model could use to recreate
the item on its own. Mention the garment type, color, fabric, pattern, cut and notable details
(neckline, sleeves, closures, trims). Ignore the person, background and accessories that are not clothing.

Return a JSON array of strings, one per item, for example:
["A fitted black wool blazer with notch lapels and a two-button closure",
 "High-waisted cream linen wide-leg trousers with front pleats"]

Return ONLY the JSON array, no explanation."""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code block, if present."""
    text = text.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        # Remove first and last lines (```json and ```)
        if lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        text = "\n".join(lines[1:])
    return text.strip()


def parse_descriptions(text: str) -> list[str]:
    """Parse the agent reply into a list of non-blank descriptions.

    Accepts a JSON array of strings, or an object with a ``descriptions``
    array. Anything else yields an empty list.
    """
    try:
        data: Any = json.loads(strip_code_fences(text))
    except json.JSONDecodeError:
        logger.warning("Clothing analysis returned non-JSON text: %.120s", text)
        return []

    if isinstance(data, dict):
        data = data.get("descriptions", [])
    if not isinstance(data, list):
        return []

    return [item.strip() for item in data if isinstance(item, str) and item.strip()]


def response_text(response: Any) -> str:
    """Concatenate the text contents of an agent response."""
    text = ""
    for msg in response.messages:
        for content in msg.contents:
            if hasattr(content, "text") and content.text:
                text += content.text
    return text


class ClothingAnalyzer:
    """Vision agent that describes the clothing found in an image."""

    def __init__(
        self,
        endpoint: str | None = None,
        deployment_name: str | None = None,
    ):
        self.endpoint = endpoint
        self.deployment_name = deployment_name
        self._agent = None

    def _get_agent(self):
        """Lazy init for the vision agent."""
        if self._agent is None:
            # Imported lazily so the studio can start without Azure credentials.
            from azure.identity import AzureCliCredential
            from agent_framework.azure import AzureOpenAIResponsesClient

            kwargs: dict[str, Any] = {"credential": AzureCliCredential()}
            if self.endpoint:
                kwargs["endpoint"] = self.endpoint
            if self.deployment_name:
                kwargs["deployment_name"] = self.deployment_name

            client = AzureOpenAIResponsesClient(**kwargs)
            self._agent = client.as_agent(
                name="ClothingAnalyzer",
                instructions=ANALYSIS_PROMPT,
            )
        return self._agent

    def _build_message(self, image_bytes: bytes):
        from agent_framework import ChatMessage, DataContent, TextContent

        return ChatMessage(
            role="user",
            contents=[
                TextContent(text="Describe the clothing in this image:"),
                DataContent(data=image_bytes, media_type=sniff_mime_type(image_bytes)),
            ],
        )

    async def describe(self, image_bytes: bytes) -> list[str]:
        """Return one description per clothing item found in the image."""
        agent = self._get_agent()
        response = await agent.run(self._build_message(image_bytes))

        descriptions = parse_descriptions(response_text(response))
        logger.info("Clothing analysis found %d item(s)", len(descriptions))
        return descriptions
