"""Infra layer utilities (blob storage)."""

from .storage import BaseBlobStore, FileBlobStore

__all__ = ["BaseBlobStore", "FileBlobStore"]
