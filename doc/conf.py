import os
import sys
from importlib.metadata import PackageNotFoundError, version as _dist_version

sys.path.insert(0, os.path.abspath(".."))

project = "pnsynth"
author = "pnsynth developers"

try:
    release = _dist_version("pnsynth")
except PackageNotFoundError:
    from pnsynth.version import __version__ as release
version = ".".join(release.split(".")[:2])

extensions = [
    "sphinx.ext.autodoc",
    "sphinx.ext.autosectionlabel",
    "sphinx.ext.githubpages",
    "sphinxcontrib.bibtex",
]
bibtex_bibfiles = ["refs.bib"]
autosectionlabel_prefix_document = True
autodoc_default_options = {
    "members": True,
    "show-inheritance": True,
}

html_theme = "sphinx_rtd_theme"
