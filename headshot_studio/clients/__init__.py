from headshot_studio.clients.base import RemoteTier
from headshot_studio.clients.rest import SecondaryGenerationClient
from headshot_studio.clients.sdk import PrimaryGenerationClient

__all__ = ["RemoteTier", "PrimaryGenerationClient", "SecondaryGenerationClient"]
