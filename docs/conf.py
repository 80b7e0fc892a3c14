# Configuration file for the Sphinx documentation builder.
#
# This file only contains a selection of the most common options. For a full
# list see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

# -- Project information -----------------------------------------------------

project = u"monospline"
copyright = u"2024, Yiming Zhang"
author = u"Yiming Zhang"

# -- General configuration ---------------------------------------------------

extensions = [
    "autoapi.extension",
    "sphinx.ext.napoleon",
    "sphinx.ext.viewcode",
    "sphinx.ext.mathjax",
]
autoapi_dirs = ["../src"]
# test fixtures are not public API
autoapi_ignore = ["*_test_utils*"]
autoapi_options = ["members", "undoc-members", "show-inheritance", "imported-members"]

napoleon_numpy_docstring = True
napoleon_google_docstring = False

# List of patterns, relative to source directory, that match files and
# directories to ignore when looking for source files.
exclude_patterns = ["_build", "Thumbs.db", ".DS_Store"]

# -- Options for HTML output -------------------------------------------------

html_theme = "pydata_sphinx_theme"

html_context = {
  'default_mode': 'light',
  'doc_path': 'docs',
}
