"""
Shared test schemas for all test files.

Decoders are immutable, so these module-level schemas are built once and
reused by every test, the same way an application defines its schemas at
startup.
"""

from shapeguard import (
    UUID,
    Array,
    Boolean,
    Date,
    Dictionary,
    Email,
    Enum,
    Int,
    Literal,
    Number,
    Object,
    Optional,
    String,
    Union,
)

# =============================================================================
# Medical Domain Schemas (Patient/Observation)
# =============================================================================

PATIENT = Object(
    {
        "id": String(),
        "name": String(min_length=1),
        "active": Boolean(),
        "age": Optional(Int(min=0)),
    }
)

OBSERVATION = Object(
    {
        "subject_ref": String(),
        "performer": String(),
        "status": Optional(Enum(["registered", "preliminary", "final"])),
        "value": Number(),
    }
)

# =============================================================================
# Account Schemas (schema algebra)
# =============================================================================

TIMESTAMPED = Object(
    {
        "id": UUID(),
        "created_at": Date(),
    }
)

ACCOUNT = TIMESTAMPED.extend(
    Object(
        {
            "email": Email(),
            "password": String(min_length=8),
            "roles": Array(Enum(["admin", "member", "viewer"])),
            "settings": Optional(Dictionary(String())),
        }
    )
)

PUBLIC_ACCOUNT = ACCOUNT.exclude("password")

# =============================================================================
# Tagged Union Schemas
# =============================================================================

CAT = Object({"kind": Literal("cat"), "lives": Int(min=0, max=9)})
DOG = Object({"kind": Literal("dog"), "good": Boolean()})
PET = Union([CAT, DOG])
