from .chunk import chunk_children

__all__ = [
    "chunk_children",
]
