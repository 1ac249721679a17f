# Ontology Models
from hostel.models.ontology import (
    Floor, Room, Tenant, HostelSettings, HostelData, default_hostel_data
)

__all__ = [
    'Floor', 'Room', 'Tenant', 'HostelSettings', 'HostelData', 'default_hostel_data'
]
