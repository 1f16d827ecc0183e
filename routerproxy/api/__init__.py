"""HTTP surface: routes, error handler, middleware."""
