import os
import sys
from datetime import date

sys.path.insert(0, os.path.abspath("../.."))

import wajs  # noqa: E402

project = "wajs"
author = "wajs Contributors"
copyright = f"{date.today().year}, wajs Contributors"

version = wajs.__version__
release = wajs.__version__

extensions = [
    "myst_parser",
    "sphinx.ext.autodoc",
    "sphinx.ext.autosummary",
    "sphinx.ext.napoleon",
]

autodoc_mock_imports = ["playwright"]

exclude_patterns: list[str] = []
source_suffix = [".rst", ".md"]
master_doc = "index"
language = "en"

html_theme = "sphinx_book_theme"
html_title = f"wajs {version} Documentation"
html_theme_options = {
    "show_toc_level": 2,
}
