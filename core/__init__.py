"""
Core Module

Shared data structures and fixed settings for the dividend report.

Components:
- models: Dividend record, reference data bundle, run configuration
- config: File names, form constants and broker column names

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

__all__ = ['models', 'config']
