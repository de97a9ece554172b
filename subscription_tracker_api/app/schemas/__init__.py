"""
Pydantic schema definitions for API payloads and stored records.

Schemas are separated from the stores so that the API representation
stays independent of how records are kept.
"""
