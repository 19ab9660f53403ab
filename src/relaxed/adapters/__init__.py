"""Adapters binding the core pipeline to browsers, parsers and typesetters."""
