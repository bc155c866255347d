from docexplorer.config.settings import Settings
from docexplorer.ocr.base import BaseOcrEngine
from docexplorer.ocr.tesseract_adapter import TesseractOcrEngine


class OcrEngineFactory:
    """Creates the OCR engine named by ``settings.ocr_engine``."""

    ENGINES: tuple[str, ...] = ("tesseract",)

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        if engine == "tesseract":
            return TesseractOcrEngine(language=settings.ocr_language)
        raise ValueError(f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ENGINES)}")
