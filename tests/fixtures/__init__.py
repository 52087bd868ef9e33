"""Model and adapter fixtures shared by the unit and integration tests."""
