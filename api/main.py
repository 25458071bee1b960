from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, HTTPException
from pydantic import BaseModel

from monster_vault.config import build_vault
from monster_vault.core.errors import PersistenceError, RecordNotFoundError, UnrecognizedFormatError
from monster_vault.core.vault import Vault

app = FastAPI(
    title="Monster Vault API",
    description="List, import and export the monsters stored in the local vault.",
    version="1.0.0",
)


@lru_cache(maxsize=1)
def get_vault() -> Vault:
    return build_vault()


# Pydantic model for one vault entry (blueprint + derived monster)
class MonsterEntry(BaseModel):
    id: int
    blueprint: Dict[str, Any]
    monster: Dict[str, Any]
    fallback: bool
    error: Optional[str] = None


class ImportResponse(BaseModel):
    imported_count: int
    ids: List[int]


def _raise_http(exc: Exception) -> None:
    if isinstance(exc, UnrecognizedFormatError):
        raise HTTPException(status_code=400, detail=f"Import failed: {exc}")
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, PersistenceError):
        raise HTTPException(status_code=500, detail=f"Storage failed: {exc}")
    raise exc


@app.get("/health", summary="Health check", response_description="API health status")
async def health_check():
    return {"status": "ok"}


@app.get("/monsters", response_model=List[MonsterEntry], summary="List monsters with derived stats")
def list_monsters(vault: Vault = Depends(get_vault)):
    try:
        return [e.to_dict() for e in vault.list_with_projections()]
    except PersistenceError as exc:
        _raise_http(exc)


@app.get("/monsters/{record_id}", response_model=MonsterEntry, summary="Get one monster")
def get_monster(record_id: int, vault: Vault = Depends(get_vault)):
    try:
        return vault.get_entry(record_id).to_dict()
    except (RecordNotFoundError, PersistenceError) as exc:
        _raise_http(exc)


@app.post("/monsters", response_model=MonsterEntry, status_code=201, summary="Add a monster")
def add_monster(blueprint: Dict[str, Any], vault: Vault = Depends(get_vault)):
    """Store a new blueprint (as produced by the editor) and return its entry."""
    try:
        return vault.add_monster(blueprint).to_dict()
    except (UnrecognizedFormatError, PersistenceError) as exc:
        _raise_http(exc)


@app.put("/monsters/{record_id}", response_model=MonsterEntry, summary="Replace a monster's blueprint")
def update_monster(record_id: int, blueprint: Dict[str, Any], vault: Vault = Depends(get_vault)):
    try:
        return vault.update_monster(record_id, blueprint).to_dict()
    except (RecordNotFoundError, UnrecognizedFormatError, PersistenceError) as exc:
        _raise_http(exc)


@app.delete("/monsters/{record_id}", status_code=204, summary="Delete one monster")
def delete_monster(record_id: int, vault: Vault = Depends(get_vault)):
    try:
        vault.delete(record_id)
    except (RecordNotFoundError, PersistenceError) as exc:
        _raise_http(exc)


@app.delete("/monsters", status_code=204, summary="Empty the vault")
def clear_vault(vault: Vault = Depends(get_vault)):
    try:
        vault.clear()
    except PersistenceError as exc:
        _raise_http(exc)


@app.post("/import", response_model=ImportResponse, summary="Import a vault export or a single monster")
def import_file(payload: Any = Body(default=None), vault: Vault = Depends(get_vault)):
    """
    Accepts the parsed content of an import file:
    `{"vault": [...]}` imports every blueprint, `{"monster": {...}}` imports one.
    """
    try:
        return vault.import_from_file(payload).to_dict()
    except (UnrecognizedFormatError, PersistenceError) as exc:
        _raise_http(exc)


@app.post("/import/srd", response_model=ImportResponse, summary="Import the bundled SRD monsters")
def import_srd(vault: Vault = Depends(get_vault)):
    try:
        return vault.import_from_pack().to_dict()
    except PersistenceError as exc:
        _raise_http(exc)


@app.get("/export", summary="Export every blueprint")
def export_vault(vault: Vault = Depends(get_vault)):
    try:
        return vault.export_all()
    except PersistenceError as exc:
        _raise_http(exc)

# To run this API:
# uvicorn api.main:app --reload --port 8000
# Then access http://127.0.0.1:8000/docs for Swagger UI
