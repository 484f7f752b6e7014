"""Shared data model, enums, exceptions, configuration, and data provider."""
