"""Movie catalog: add, sorted/paginated listing, watched status, delete."""
