# Business Services
from hostel.services.entity_store import EntityStore
from hostel.services.persistence import PersistenceAdapter
from hostel.services.report_service import ReportService
from hostel.services.receipt_service import ReceiptComposer
from hostel.services.llm_service import AdviceService

__all__ = [
    'EntityStore', 'PersistenceAdapter', 'ReportService',
    'ReceiptComposer', 'AdviceService'
]
