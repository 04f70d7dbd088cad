"""Command line interface: read a model file, write its steady states as CSV."""
