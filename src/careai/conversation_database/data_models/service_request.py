"""
Service request data model and storage interface.

A 'ServiceRequest' records a user's request for a specific social service
(housing support, food assistance, ...). The conversation engine answers
service-specific questions but does not drive request status transitions;
those belong to a dedicated workflow, so this module only defines the record
and its repository.
"""

from abc import ABC, abstractmethod
from enum import StrEnum

from pydantic import BaseModel, Field, JsonValue


class RequestStatus(StrEnum):
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    COMPLETED = "Completed"
    FAILED = "Failed"
    AWAITING_INFORMATION = "AwaitingInformation"


class ServiceRequest(BaseModel):
    """A request for a social service raised on behalf of a user."""

    id: str
    user_id: str
    service_type: str
    parameters: dict[str, JsonValue] = Field(default_factory=dict)
    status: RequestStatus = RequestStatus.PENDING
    create_timestamp: int
    update_timestamp: int
    complete_timestamp: int | None = None


class ServiceRequestDatabase(ABC):
    """Abstract repository for 'ServiceRequest' records."""

    @abstractmethod
    async def create_service_request(self, service_request: ServiceRequest) -> ServiceRequest:
        pass

    @abstractmethod
    async def get_service_request_by_id(self, service_request_id: str) -> ServiceRequest | None:
        pass

    @abstractmethod
    async def get_service_requests_by_user_id(self, user_id: str) -> list[ServiceRequest]:
        pass

    @abstractmethod
    async def update_service_request(self, service_request: ServiceRequest) -> ServiceRequest:
        pass
