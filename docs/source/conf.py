"""Sphinx configuration file for Parmox documentation."""

import sys
from pathlib import Path

# Add src to path so autodoc can find the package
sys.path.insert(0, str(Path("../../src").resolve()))

# Project information
project = "Parmox"
copyright = "2025, Parmox Team"  # noqa: A001
author = "Parmox Team"
release = "0.1.0"

extensions = [
  "sphinx.ext.autodoc",
  "sphinx.ext.napoleon",
  "sphinx_autodoc_typehints",
  "myst_parser",
]

# Google-style docstrings only
napoleon_google_docstring = True
napoleon_numpy_docstring = False

autodoc_member_order = "bysource"

html_theme = "sphinx_book_theme"

source_suffix = [".rst", ".md"]
