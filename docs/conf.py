# Configuration file for the Sphinx documentation builder.
#
# For the full list of built-in configuration values, see the documentation:
# https://www.sphinx-doc.org/en/master/usage/configuration.html

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join('..')))

# -- Project information -----------------------------------------------------

project = 'vkguide'
copyright = '2025, Grant Duffy'
author = 'Grant Duffy'
release = '0.1.0'

# -- General configuration ---------------------------------------------------

extensions = [
    'sphinx.ext.autodoc',
]

# the docs build without a Vulkan loader or a display
autodoc_mock_imports = ['vulkan', 'glfw']
autodoc_member_order = 'bysource'

templates_path = ['_templates']
exclude_patterns = ['_build']

# -- Options for HTML output -------------------------------------------------

html_theme = 'alabaster'
html_static_path = []
