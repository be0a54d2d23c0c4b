"""
Test suite for the Work Log Assistant.

This package contains tests for all core functionality including:
- Type definitions and data structures
- Date anchors and extraction prompt construction
- Response normalization and ticket key repair
- Work log submission and partial-failure reporting
- Configuration management
- End-to-end processing and the CLI
"""
