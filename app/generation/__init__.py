from app.generation.factory import GatewayFactory
from app.generation.gateway import GenerationGateway
from app.generation.rotator import CredentialRotator

__all__ = ["CredentialRotator", "GatewayFactory", "GenerationGateway"]
