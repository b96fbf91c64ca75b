"""Domain layer: types, errors, events and protocols shared by the SDK."""
