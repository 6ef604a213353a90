"""Read-side queries shared by services and routes."""
