"""
Authentication provider abstractions.

An 'AuthProvider' integrates with a FastAPI application to decide whether a
request may reach the conversation routes. The service ships a single
implementation, 'ApiKeyAuthProvider', which checks one shared secret.
"""

from abc import ABC, abstractmethod

from fastapi import FastAPI, Request


class AuthProvider(ABC):
    """
    Abstract base class for authentication backends.

    Implementors decide per request whether access is granted ('is_authorized')
    and register whatever middleware or routes they need ('bind_to_app').
    """

    @abstractmethod
    def is_authorized(self, request: Request) -> bool:
        pass

    @abstractmethod
    def bind_to_app(self, app: FastAPI) -> None:
        """Register routes and middleware required by this provider."""
        pass
