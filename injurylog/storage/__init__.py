"""Flat-file storage: codecs, roster parsing and the update coordinator."""
