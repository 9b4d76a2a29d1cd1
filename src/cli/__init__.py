"""Command-line interface for pzcache."""
