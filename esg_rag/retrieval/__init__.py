"""Hybrid retrieval stack: provider clients, merge steps and the pipeline."""
