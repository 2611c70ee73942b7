"""Client-side services: derived views over fetched data and the cached tracker facade."""
