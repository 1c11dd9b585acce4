"""
APL Kernel API — FastAPI endpoints.

Exposes the kernel's functionality via a REST API for:
- APL declaration and inspection
- Checking combat logs against a declared APL
- One-shot checks with an inline APL
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ValidationError

from apl_kernel.conditions.registry import ConditionSpecError, UnknownConditionError
from apl_kernel.engine.evaluator import APLEvaluator
from apl_kernel.logging import configure_logging, get_logger
from apl_kernel.models.definition import AplDefinition
from apl_kernel.models.events import parse_events
from apl_kernel.registry.store import AplStore, build_apl
from apl_kernel.settings import Settings

logger = get_logger(__name__)

VERSION = "0.1.0"


# --- Request/Response Models ---

class CheckRequest(BaseModel):
    player_id: int
    events: List[dict]


class InlineCheckRequest(BaseModel):
    apl: AplDefinition
    player_id: int
    events: List[dict]


def _declaration_error(exc: Exception) -> HTTPException:
    return HTTPException(422, f"Invalid APL declaration: {exc}")


# --- Application Factory ---

def create_app(
    apl_store: Optional[AplStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = settings or Settings()
    configure_logging(settings.log_level, settings.json_logs)

    app = FastAPI(
        title="APL Kernel API",
        description="Action Priority List conformance checks for combat logs",
        version=VERSION,
    )

    store = apl_store or AplStore()

    app.state.apl_store = store
    app.state.settings = settings

    def _parse(events: List[dict]):
        if len(events) > settings.max_events_per_check:
            raise HTTPException(
                413,
                f"Too many events: {len(events)} > {settings.max_events_per_check}",
            )
        try:
            return parse_events(events)
        except ValidationError as e:
            raise HTTPException(422, f"Invalid event: {e}") from e

    # === APL MANAGEMENT ===

    @app.post("/apls")
    def declare_apl(definition: AplDefinition):
        """Declare a new APL."""
        try:
            apl_id = store.register(definition)
        except (UnknownConditionError, ConditionSpecError, ValidationError) as e:
            raise _declaration_error(e) from e
        logger.info("apl_declared", apl_id=apl_id, name=definition.name,
                    rules=len(definition.rules))
        return {"id": apl_id, "apl": definition.model_dump(mode="json")}

    @app.get("/apls")
    def list_apls():
        """List all declared APLs."""
        return store.list()

    @app.get("/apls/{apl_id}")
    def get_apl(apl_id: str):
        """Get a specific APL declaration."""
        definition = store.get_definition(apl_id)
        if definition is None:
            raise HTTPException(404, "APL not found")
        return {"id": apl_id, "apl": definition.model_dump(mode="json")}

    @app.delete("/apls/{apl_id}")
    def delete_apl(apl_id: str):
        """Remove an APL."""
        if not store.remove(apl_id):
            raise HTTPException(404, "APL not found")
        return {"status": "removed", "apl_id": apl_id}

    # === CHECKS ===

    @app.post("/apls/{apl_id}/check")
    def check_apl(apl_id: str, req: CheckRequest):
        """Check a combat log against a declared APL."""
        evaluator = store.get(apl_id)
        if evaluator is None:
            raise HTTPException(404, "APL not found")
        events = _parse(req.events)
        result = evaluator.evaluate(events, req.player_id)
        logger.info("apl_checked", apl_id=apl_id, player_id=req.player_id,
                    events=len(events), successes=len(result.successes),
                    violations=len(result.violations))
        return result.model_dump(mode="json")

    @app.post("/check")
    def check_inline(req: InlineCheckRequest):
        """Check a combat log against an APL declared in the request itself."""
        try:
            apl = build_apl(req.apl)
        except (UnknownConditionError, ConditionSpecError, ValidationError) as e:
            raise _declaration_error(e) from e
        events = _parse(req.events)
        result = APLEvaluator(apl).evaluate(events, req.player_id)
        return result.model_dump(mode="json")

    # === HEALTH ===

    @app.get("/health")
    def health():
        return {"status": "ok", "version": VERSION}

    return app
