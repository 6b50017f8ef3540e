"""Service layer - business logic for the contact engine."""
