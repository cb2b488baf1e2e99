"""ORM models for the SRM kernel."""

from srm_kernel.models.kv_entry import KeyValueEntry

__all__ = ["KeyValueEntry"]
