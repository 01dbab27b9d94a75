"""Request-level activities built on the static map pipeline."""
