"""Dashboard API - REST routes and WebSocket updates."""
