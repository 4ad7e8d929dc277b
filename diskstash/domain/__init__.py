"""Domain Layer: value objects, errors and the ports the rest of the package implements."""
