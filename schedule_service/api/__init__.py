"""HTTP gateway for the schedule service."""
