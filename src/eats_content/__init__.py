"""Recipe content normalization for the eats publishing frontend."""
