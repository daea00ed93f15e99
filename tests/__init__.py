"""
TVmaze Client Test Suite

Test Categories:
- unit/: Fast, isolated unit tests (HTTP is faked with httpx.MockTransport)
- fixtures/: Shared test data and mocks
"""
