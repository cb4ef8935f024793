"""Update engine for upvibe.

Version comparison, strategy resolution, install command construction,
process execution and the update orchestrator.
"""
