# API Routers
from hostel.routers import floors, rooms, tenants, settings, reports, ai

__all__ = ['floors', 'rooms', 'tenants', 'settings', 'reports', 'ai']
