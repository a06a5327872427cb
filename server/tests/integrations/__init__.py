"""
Integration test modules

Tests for the outbound mail integration: credential parsing, token minting,
MIME building and each provider's sender.
"""
