# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the StyleBatch documentation."""

project = "StyleBatch"
author = "StyleBatch Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_typehints = "description"

html_theme = "alabaster"
