"""Bundled data files for upvibe."""
