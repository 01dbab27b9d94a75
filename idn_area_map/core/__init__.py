"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Named constants (URL budget, stage caps, defaults)
- exceptions: Custom exception hierarchy
"""
