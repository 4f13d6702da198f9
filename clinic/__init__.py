"""Core modules of the Clinic Portal: routing, session storage, and the clinic API client."""
