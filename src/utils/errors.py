"""Error handling utilities."""


class ImmowayError(Exception):
    """Base exception for the IMMOWAY proxy."""
    pass


class SupabaseError(ImmowayError):
    """Supabase operation error."""
    pass


class CompletionError(ImmowayError):
    """Language model completion failed or returned nothing usable."""
    pass


class LeadValidationError(ImmowayError):
    """Lead submission is missing a required field."""

    def __init__(self, field: str):
        super().__init__(f"Missing required lead field: {field}")
        self.field = field
