"""Service layer — business logic; blueprints stay thin."""
