"""Data models for Quote Card Editor."""
