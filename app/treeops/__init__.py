"""treeops - selective copy, move, delete and find over directory trees."""

__version__ = "0.1.0"
