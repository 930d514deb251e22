"""
Network Unification Module

Splits, snaps and classifies the grown network for rendering, with an
asynchronous request/response boundary.
"""

from .unifier import NetworkUnifier, unify_network
from .worker import UnifierWorker, build_request, unify_async

__all__ = [
    'NetworkUnifier',
    'unify_network',
    'UnifierWorker',
    'build_request',
    'unify_async',
]
