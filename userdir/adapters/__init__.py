"""Adapter package for external I/O implementations.

Purpose:
    Concrete implementations of ``UserSourcePort``: the REST adapter used at
    runtime and an in-memory source for the offline demo and tests.

Dependencies:
    ``requests`` for network I/O; domain entities for the returned pages.
"""
