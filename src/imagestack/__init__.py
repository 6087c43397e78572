"""Top-level package for image-stack-pdf.

Combines a batch of raster images into a single tall PDF page.

Provides subpackages:
- imagestack.loading – input validation and concurrent image decoding
- imagestack.layout – pure vertical stacking layout engine
- imagestack.output – format negotiation and PDF assembly (ReportLab)
- imagestack.controller – end-to-end conversion pipeline
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path

    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    if pyproject.exists():
        try:
            for line in pyproject.read_text().splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "0.3.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass

    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("image-stack-pdf")
    except Exception:
        return "0.0.0"


__version__ = _get_version()
__all__: list[str] = ["__version__"]
