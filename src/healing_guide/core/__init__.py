"""Core resolution pipeline for healing-guide."""
