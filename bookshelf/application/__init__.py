"""
Application layer.

Use cases orchestrate the book repository: they check the caller identity,
validate input, delegate to the repository port and narrow failures into
the BookErrorCode taxonomy.
"""
