"""Linkroom: email-based visitor routing for shared document links."""
