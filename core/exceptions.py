"""
Tour Admin exception hierarchy.

Every failure the admin API can surface to a user derives from
``TourAdminError``. Routers map each subclass to an HTTP status; anything
outside this hierarchy is treated as an internal error.
"""


class TourAdminError(Exception):
    """Base class for expected failures of admin operations."""
    pass


class DatastoreError(TourAdminError):
    """
    A table read or write against Supabase failed.

    Always fatal to the operation that issued it; the prior row state is
    whatever the datastore kept.
    """
    pass


class RecordNotFoundError(TourAdminError):
    """The targeted tour, stop or category row does not exist."""

    def __init__(self, table: str, record_id: str):
        self.table = table
        self.record_id = record_id
        super().__init__(f"No row in '{table}' with id '{record_id}'.")


class MediaUploadError(TourAdminError):
    """Writing an object to storage (or resolving its public URL) failed."""
    pass


class CategoryInUseError(TourAdminError):
    """A category still has tours assigned and cannot be deleted."""

    def __init__(self, category_id: str, tour_count: int):
        self.category_id = category_id
        self.tour_count = tour_count
        super().__init__(
            f"This category has {tour_count} tour(s). "
            "Move those tours to another category before deleting."
        )
