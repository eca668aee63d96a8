"""Bundled static resources."""

from pathlib import Path

# Entry page and glue script for the Structurizr UI. The page loads the UI
# scripts and their libraries from jsDelivr; those requests leave the virtual
# origin untouched. ``browser.assets_dir`` replaces this directory with a
# local, fully offline asset set.
STRUCTURIZR_ASSETS = Path(__file__).parent / "structurizr"
