"""Sphinx configuration for selloutctl documentation."""

import importlib.metadata

# -- Project information -----------------------------------------------------

project = "selloutctl"
author = "selloutctl contributors"
copyright = "2026, selloutctl contributors"
release = importlib.metadata.version("selloutctl")
version = ".".join(release.split(".")[:2])

# -- General configuration ---------------------------------------------------

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.intersphinx",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx_copybutton",
    "myst_parser",
]

exclude_patterns = ["_build"]

# -- Options for autodoc -----------------------------------------------------

autodoc_member_order = "bysource"
autodoc_typehints = "description"

# -- Options for Napoleon (Google-style docstrings) --------------------------

napoleon_google_docstring = True
napoleon_numpy_docstring = False

# -- Options for intersphinx -------------------------------------------------

intersphinx_mapping = {
    "python": ("https://docs.python.org/3", None),
    "httpx": ("https://www.python-httpx.org/", None),
    "pydantic": ("https://docs.pydantic.dev/latest/", None),
}

# -- Options for MyST (Markdown support) -------------------------------------

source_suffix = {
    ".rst": "restructuredtext",
    ".md": "markdown",
}

# -- Options for HTML output -------------------------------------------------

html_theme = "furo"
html_title = f"selloutctl {release}"

# -- Options for sphinx-copybutton -------------------------------------------

copybutton_prompt_text = r"^\$ "
copybutton_prompt_is_regexp = True
