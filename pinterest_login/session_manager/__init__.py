"""Browser login, cookie harvesting and the local session manager service."""
