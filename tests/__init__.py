"""
Test suite for the lawquill project.

This module contains all unit tests for the lawquill package.
"""
