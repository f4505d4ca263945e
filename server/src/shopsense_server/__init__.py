"""Shopsense tracking service - the tracking engine over HTTP."""
