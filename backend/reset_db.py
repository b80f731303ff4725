"""Reset the document store to a clean state and load the demo tickets.

Usage:
    DATABASE_URL=postgresql://... python reset_db.py
"""
import sys

from repairdesk.lib.db import create_db_engine, drop_db
from repairdesk.lib.settings import settings
from repairdesk.models.service_requests import COLLECTION
from repairdesk.services.document_store import DocumentStore


DEMO_REQUESTS = {
    "SC-001": {
        "customerName": "John Smith",
        "email": "john.smith@email.com",
        "phone": "+1-555-0123",
        "address": "123 Main St, City, State 12345",
        "serviceType": "Computer Repair",
        "description": "Laptop not turning on, blue screen issues",
        "urgency": "High",
        "preferredDate": "2024-01-15",
        "status": "In Progress",
        "createdAt": "2024-01-10T09:00:00Z",
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
        "createdAt": "2024-01-08T16:45:00Z",
    },
}


if not settings.database_url:
    print("DATABASE_URL is not set")
    sys.exit(1)

print("Resetting database...")
drop_db(create_db_engine(settings.database_url))

store = DocumentStore.from_url(settings.database_url)
for request_id, data in DEMO_REQUESTS.items():
    store.set(COLLECTION, request_id, data)
store.close()

print(f"Database reset complete! Loaded {len(DEMO_REQUESTS)} demo service requests.")
