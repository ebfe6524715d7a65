"""
CLI runner module.

Provides commands:
- images: Download page images of a document
- file: Download source files of a document
- tokens: Print OCR tokens of a document
- upload: Upload a document
- document list: List documents by id
- config list / config init: Inspect or create profiles
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
