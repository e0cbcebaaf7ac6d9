"""
Domain layer.

The domain layer holds the book catalogue's business types and pure logic.
It has no dependencies on the web framework or the persistence layer.

This layer contains:
- Entities: Book, identified by a stable BookId and owned by one OwnerId
- Value Objects: strongly-typed identifiers
- Domain Services: search-text normalization
"""
