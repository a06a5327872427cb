"""SignDesk: stamp signatures onto PDFs and deliver the signed copy by email."""

__version__ = "0.1.0"
