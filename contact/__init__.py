"""
Contact Submissions App

Handles contact form submissions:
- Public form intake, one JSON document per submission
- Admin listing, detail, completion and deletion behind bearer tokens
- Swappable storage backend (see contact.storage)
"""
