"""
Core functionality for the Work Log Assistant.

This package contains the main logic for:
- Relative-date anchoring and extraction prompt construction
- Language-model extraction of work log entries
- Normalization and repair of extracted entries
- Work log submission to the issue tracker
- Speech-to-text conversion
- Configuration management
"""
