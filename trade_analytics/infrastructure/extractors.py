"""Image Extractors: Statement screenshots -> CSV text.

The analytics core never sees images. An extractor turns one image into
CSV text with the standard header (Pair, Start Date, Status, Trade Type,
Profit/Loss) and the image repository feeds that text to the parser.

Extractors are constructed by the caller and injected; there is no
module-level client.
"""

from __future__ import annotations

import base64
import logging
import re
from abc import ABC, abstractmethod
from typing import Any

from trade_analytics.infrastructure.config import (
    DEFAULT_EXTRACTOR_CONFIG,
    ExtractorConfig,
)

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:csv)?[ \t]*\n?", re.IGNORECASE)


class ExtractionError(RuntimeError):
    """Raised when an image cannot be turned into CSV text."""


class ImageToTableExtractor(ABC):
    """Converts a statement image into CSV text."""

    @abstractmethod
    def extract(self, image_bytes: bytes, mime_type: str) -> str:
        """Extract the trade table from an image.

        Args:
            image_bytes: Raw image content
            mime_type: e.g. "image/png"

        Returns:
            CSV text including the header row

        Raises:
            ExtractionError: If the service fails or returns no usable text
        """
        pass


def clean_csv_response(text: str) -> str:
    """Strip markdown code fences and surrounding whitespace."""
    return _CODE_FENCE.sub("", text or "").strip()


class OpenAITableExtractor(ImageToTableExtractor):
    """Extractor backed by a vision-capable OpenAI model.

    Example:
        >>> from openai import OpenAI
        >>> extractor = OpenAITableExtractor(OpenAI())
        >>> csv_text = extractor.extract(png_bytes, "image/png")
    """

    def __init__(self, client: Any, config: ExtractorConfig = DEFAULT_EXTRACTOR_CONFIG):
        """Initialize the extractor.

        Args:
            client: An openai.OpenAI instance (or compatible object)
            config: Model and prompt settings
        """
        self._client = client
        self._config = config

    def extract(self, image_bytes: bytes, mime_type: str) -> str:
        encoded = base64.b64encode(image_bytes).decode("ascii")
        logger.info("Sending %d-byte %s image to %s", len(image_bytes), mime_type, self._config.model)

        try:
            response = self._client.responses.create(
                model=self._config.model,
                input=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "input_image",
                                "image_url": f"data:{mime_type};base64,{encoded}",
                            },
                            {"type": "input_text", "text": self._config.prompt},
                        ],
                    }
                ],
            )
            raw_text = response.output_text
        except Exception as exc:
            logger.exception("Image extraction call failed: %s", exc)
            raise ExtractionError(f"Failed to analyze image with AI: {exc}") from exc

        csv_text = clean_csv_response(raw_text)
        if not csv_text:
            raise ExtractionError(
                "Could not extract any data from the image. "
                "Please ensure the image is clear and contains a trade table."
            )

        logger.debug("Extracted CSV:\n%s", csv_text)
        return csv_text
