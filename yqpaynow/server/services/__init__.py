"""Service layer: business rules between the API routers and the repositories."""
