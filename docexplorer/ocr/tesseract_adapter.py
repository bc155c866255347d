import pytesseract
from PIL import Image

from docexplorer.ocr.base import BaseOcrEngine, OcrPage
from docexplorer.ocr.exceptions import OcrError


class TesseractOcrEngine(BaseOcrEngine):
    """Recognizes page images with the Tesseract engine via pytesseract."""

    def __init__(self, language: str = "eng") -> None:
        self._language = language

    def recognize(self, image: Image.Image) -> OcrPage:
        try:
            data = pytesseract.image_to_data(
                image, lang=self._language, output_type=pytesseract.Output.DICT
            )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrError(f"Tesseract is not installed: {exc}") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise OcrError(f"Tesseract recognition failed: {exc}") from exc

        lines: dict[tuple[int, int, int], list[str]] = {}
        confidences: list[float] = []
        for index, word in enumerate(data["text"]):
            if not word or not word.strip():
                continue
            key = (data["block_num"][index], data["par_num"][index], data["line_num"][index])
            lines.setdefault(key, []).append(word.strip())
            confidence = float(data["conf"][index])
            if confidence >= 0:
                confidences.append(confidence)

        text = "\n".join(" ".join(words) for words in lines.values())
        mean = sum(confidences) / len(confidences) if confidences else 0.0
        return OcrPage(text=text, confidence=mean)
