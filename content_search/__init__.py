"""Keeps per-site search indexes in sync with the content store and serves suggestions."""
