from docexplorer.summarization.base import BaseSummarizer
from docexplorer.summarization.factory import SummarizerFactory
from docexplorer.summarization.summarizer import Summarizer

__all__ = ["BaseSummarizer", "Summarizer", "SummarizerFactory"]
