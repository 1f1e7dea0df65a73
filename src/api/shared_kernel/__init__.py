"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
bounded contexts: bearer credential verification and the observation context
used by every domain probe.

Following Domain-Driven Design principles, the Shared Kernel is a small,
carefully managed set of components that contexts agree to depend on.
"""
