"""Core conversion layer: ODT reader, converters, services."""
