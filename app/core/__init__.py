"""
Core Application - Infrastructure & Base Classes

Generic, reusable infrastructure with no payment-specific logic.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Result wrapper for expected outcomes

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError: Input validation failures
    - NotFoundError: Resource not found
    - ConflictError: State conflicts (duplicates, etc.)

Exception handler (core.exception_handler):
    - application_exception_handler: DRF EXCEPTION_HANDLER

Helpers (import from core.helpers):
    - validate_uuid: UUID validation
    - calculate_pagination: Pagination metadata calculation
"""
