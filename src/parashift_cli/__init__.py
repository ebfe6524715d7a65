"""
Parashift command-line client.

Upload documents to the Parashift document-processing API, list them, and
download their page images, source files and OCR tokens. Credentials come
from named profiles in ~/.parashift/pp.yaml.
"""

__version__ = "0.1.0"
