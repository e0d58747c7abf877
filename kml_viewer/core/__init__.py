"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants, table labels, map defaults
- exceptions: Custom exception hierarchy
- ingress: HTTP request handling for the Functions entrypoint
"""
