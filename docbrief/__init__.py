"""
docbrief — PDF summarization with a local extractive mode and an LLM mode.

Extracts text from a PDF (docling with pypdf fallback), summarizes it either
locally or through an OpenAI-compatible completion endpoint, and coerces the
model's free-form reply into a structured ``SummaryRecord``.
"""

__version__ = "0.1.0"
