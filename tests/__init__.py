"""Test suite for the yaml-tree package.

This package contains unit and integration tests validating tree
construction from YAML streams, shape validation, emission, the native
tree form, settings and the command-line interface.
"""
