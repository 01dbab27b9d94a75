"""Orchestration of the adaptive static map pipeline."""
