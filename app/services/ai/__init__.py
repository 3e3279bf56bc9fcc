"""
AI text-generation providers and the gateway that routes between them.
"""
from app.services.ai.gateway import AIGateway, GenerationResult

__all__ = ["AIGateway", "GenerationResult"]
