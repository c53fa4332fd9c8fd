"""Subcommand entry points wired into ``mcq_generator.cli``."""
