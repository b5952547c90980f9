from movies_library.db.base_class import Base  # noqa: F401

# Import ALL models so SQLAlchemy registers them
from movies_library.models.storage_entry import StorageEntry  # noqa: F401
