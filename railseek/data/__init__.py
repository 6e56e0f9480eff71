"""
Data module - Reference data and schemas for railseek.

This module contains:
- schemas: pydantic models shared by every layer
- network: the bundled station and connection JSON files
"""
