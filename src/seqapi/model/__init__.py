"""
Resource models shared by the client.

Usage:
    from seqapi.model import Entity, Link, RootEntity
"""

from seqapi.model.links import Entity, Link, Linked
from seqapi.model.root import RootEntity

__all__ = ["Entity", "Link", "Linked", "RootEntity"]
