"""Snapshot orchestration.

- viewer_pipeline: load -> classify -> measure -> immutable ViewerSnapshot
"""
