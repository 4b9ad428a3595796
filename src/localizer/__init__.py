"""
Video Localizer - Subtitle translation and packaging with GPT.

A pipeline for:
- Loading subtitles from SRT/SBV uploads, captions or speech-to-text segments
- Proofreading the source transcript
- Translating subtitles in validated chunks while preserving timing
- Translating video titles and descriptions
- Packaging SRT/WebVTT files and metadata into a zip archive
"""

__version__ = "0.1.0"
