"""Bundled JSON-Schema documents for JSend envelopes."""
