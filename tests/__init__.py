"""Unit tests for AutoLocale.

This package contains test modules for all components of the localization pipeline.
Tests use pytest with asyncio support and replace network calls and sleeps with fakes.
"""
