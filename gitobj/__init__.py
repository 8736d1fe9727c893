"""Read and write Git blobs and commits in loose-object or in-memory stores."""

__version__ = "2.0.0"