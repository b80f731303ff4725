"""
Shared fixtures: isolated in-memory document stores and sample tickets.
"""
from datetime import datetime, timezone

import pytest

from repairdesk.models.service_requests import (
    COLLECTION as REQUESTS,
    NewServiceRequest,
    ServiceRequest,
    ServiceType,
    Urgency,
)
from repairdesk.services.container import build_services
from repairdesk.services.document_store import DocumentStore


# Tickets from the shop's original demo data
SAMPLE_REQUESTS = {
    "SC-001": {
        "customerName": "John Smith",
        "email": "john.smith@email.com",
        "phone": "+1-555-0123",
        "address": "123 Main St, City, State 12345",
        "serviceType": "Computer Repair",
        "description": "Laptop not turning on, blue screen issues",
        "urgency": "High",
        "preferredDate": "2024-01-15",
        "status": "Pending",
        "userId": "user-john",
        "createdAt": "2024-01-10T09:00:00Z",
        "updatedAt": "2024-01-12T14:30:00Z",
    },
    "SC-002": {
        "customerName": "Sarah Johnson",
        "email": "sarah.j@business.com",
        "phone": "+1-555-0456",
        "address": "456 Oak Ave, Business Park, State 12346",
        "serviceType": "Networking",
        "description": "Office network setup for 20 employees",
        "urgency": "Medium",
        "preferredDate": "2024-01-20",
        "status": "Pending",
        "createdAt": "2024-01-12T11:15:00Z",
        "updatedAt": "2024-01-12T11:15:00Z",
    },
    "SC-003": {
        "customerName": "Mike Davis",
        "email": "mike.davis@home.net",
        "phone": "+1-555-0789",
        "address": "789 Pine St, Residential Area, State 12347",
        "serviceType": "Printer Repair",
        "description": "HP LaserJet not printing, paper jam error",
        "urgency": "Low",
        "preferredDate": "2024-01-18",
        "status": "Completed",
        "userId": "user-john",
        "createdAt": "2024-01-08T16:45:00Z",
        "updatedAt": "2024-01-14T10:20:00Z",
    },
}

SAMPLE_NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture
def sample_requests():
    """SC-001..SC-003 as parsed tickets, newest first."""
    tickets = [ServiceRequest.from_document(rid, data) for rid, data in SAMPLE_REQUESTS.items()]
    return sorted(tickets, key=lambda r: r.created_at, reverse=True)


@pytest.fixture
def document_store():
    """Fresh in-memory document store for each test."""
    store = DocumentStore.from_url("sqlite://")
    yield store
    store.close()


@pytest.fixture
def seeded_store(document_store):
    """Document store holding SC-001..SC-003."""
    for request_id, data in SAMPLE_REQUESTS.items():
        document_store.set(REQUESTS, request_id, dict(data))
    return document_store


@pytest.fixture
def services(seeded_store):
    """Started service graph over the seeded store."""
    services = build_services(seeded_store)
    services.start()
    yield services
    services.stop()


@pytest.fixture
def new_request():
    """A valid intake submission."""
    return NewServiceRequest(
        customer_name="Priya Sharma",
        email="priya@example.com",
        phone="+91 9876543210",
        address="12 Court Road, Saharanpur",
        service_type=ServiceType.COMPUTER_REPAIR,
        description="Desktop restarts randomly",
        urgency=Urgency.HIGH,
        preferred_date="2099-01-01",
    )
