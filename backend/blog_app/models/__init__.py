"""
Blog Backend: ORM Models
=========================

Importing this package registers every model on `Base.metadata`
(used by Alembic autogenerate and `Database.create_all`).
"""

from blog_app.models.author import Author
from blog_app.models.post import Post

__all__ = ["Author", "Post"]
