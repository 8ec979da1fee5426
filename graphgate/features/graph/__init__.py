"""Generic entity, relationship and recommendation dispatchers."""
