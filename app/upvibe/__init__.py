"""upvibe - one command to update all your npm packages."""

__version__ = "1.2.0"
