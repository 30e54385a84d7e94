"""
KeepFOSS Test Suite
===================

Organized test structure:
- unit/: Unit tests for the note model, backup codec and configuration
- integration/: End-to-end tests through the application wiring
- top level: note store, live query and notes service

Run tests with:
    pytest tests/unit/
    pytest tests/integration/
    pytest tests/
"""
