"""
Module: imagestack.output

Purpose:
    PDF generation for the stacked layout.
    Negotiates embedding formats and drives ReportLab.

Key Classes:
    - DocumentAssembler: Assembler interface
    - ReportLabAssembler: ReportLab-backed implementation
    - ImageFormatPolicy: Embedding policy

Key Functions:
    - prepare_for_embedding(): Encode an image for the assembler

Dependencies:
    - reportlab: PDF generation
    - PIL: Re-encoding
"""

from .assembler import DocumentAssembler, ReportLabAssembler
from .formats import ImageFormatPolicy, prepare_for_embedding

__all__ = [
    "DocumentAssembler",
    "ReportLabAssembler",
    "ImageFormatPolicy",
    "prepare_for_embedding",
]
