"""Stages of the image metadata extraction step."""
