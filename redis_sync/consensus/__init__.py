"""Consensus package initialization"""

from .quorum import QuorumCoordinator, QuorumResult, majority

__all__ = ['QuorumCoordinator', 'QuorumResult', 'majority']
