"""
FastAPI dependency injection utilities for services and shared collaborators.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.database import get_db
from app.services.auth import AuthService
from app.services.property import PropertyService
from app.services.identity import GoogleIdentityVerifier


async def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    """
    Get authentication service instance.

    Args:
        db: Database session

    Returns:
        AuthService instance
    """
    return AuthService(db)


async def get_property_service(db: AsyncSession = Depends(get_db)) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session

    Returns:
        PropertyService instance
    """
    return PropertyService(db)


def get_identity_verifier(request: Request) -> GoogleIdentityVerifier:
    """Identity verifier built once by the application factory."""
    return request.app.state.identity_verifier
