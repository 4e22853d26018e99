"""Email and SMS review-request dispatch service."""
