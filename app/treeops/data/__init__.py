"""Bundled data files for treeops."""
