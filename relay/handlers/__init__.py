"""Server-side handlers: admission control, rate limiting and the session registry."""
