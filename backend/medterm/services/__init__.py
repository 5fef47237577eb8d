from medterm.services.content_client import ContentClient

__all__ = ["ContentClient"]
