"""
B_parsing: PDF text extraction, normalization and section segmentation.

Provides:
- PdfTextExtractor: page-ordered text with baseline-derived line breaks
- normalize_text: whitespace, OCR and bullet cleanup
- split_into_sections / segment_by_phase: the two segmentation strategies
"""
