from abc import ABC, abstractmethod
from dataclasses import dataclass

from PIL import Image


@dataclass(frozen=True)
class OcrPage:
    """Recognized text of one page image and the engine's mean word confidence (0-100)."""

    text: str
    confidence: float


class BaseOcrEngine(ABC):
    """Contract for all optical character recognition adapters."""

    @abstractmethod
    def recognize(self, image: Image.Image) -> OcrPage:
        """Recognize the text on a single rasterized page.

        Raises:
            OcrError: if the engine is unavailable or fails on the image.
        """
