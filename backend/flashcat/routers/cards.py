"""
Card collection router.

Endpoints:
  GET    /cards                    list cards (optionally by category)
  POST   /cards                    create one card
  POST   /cards/import             upload a CSV file
  GET    /cards/export             download the collection as CSV
  POST   /cards/starter            seed the starter vocabulary
  POST   /cards/deduplicate        drop cards with a repeated front
  GET    /cards/stats/categories   per-category mastery counts
  GET    /cards/{id}               single card
  PATCH  /cards/{id}               edit a card
  PUT    /cards/{id}/mnemonic      set the memory aid
  DELETE /cards/{id}               delete a card and its progress
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Body, Depends, HTTPException, Query, UploadFile
from fastapi.responses import PlainTextResponse

from flashcat.db.sqlite import get_db, list_flashcards
from flashcat.models.flashcard import (
    CategoryStats,
    Flashcard,
    FlashcardCreate,
    FlashcardList,
    FlashcardUpdate,
    ImportResult,
)
from flashcat.services.card_store import CardStore, UnknownCard
from flashcat.services.csv_io import CSVImportError, build_flashcard, export_csv
from flashcat.services.starter_vocabulary import STARTER_VOCABULARY

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=FlashcardList)
async def list_cards(
    category: str | None = Query(default=None),
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=1000),
    db: aiosqlite.Connection = Depends(get_db),
) -> FlashcardList:
    items, total = await list_flashcards(db, category=category, offset=offset, limit=limit)
    return FlashcardList(items=items, total=total)


@router.post("", response_model=Flashcard, status_code=201)
async def create_card(
    body: FlashcardCreate,
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    store = await CardStore.load(db)
    card = build_flashcard(body.front, body.back, body.notes, body.category, body.gender)
    added = await store.add_cards([card])
    if not added:
        raise HTTPException(409, "A card with the same front or back already exists")
    return added[0]


@router.post("/import", response_model=ImportResult)
async def import_cards(
    file: UploadFile,
    db: aiosqlite.Connection = Depends(get_db),
) -> ImportResult:
    content = await file.read()
    store = await CardStore.load(db)
    try:
        result = await store.import_cards(content)
    except CSVImportError as exc:
        raise HTTPException(400, str(exc)) from exc
    except UnicodeDecodeError as exc:
        raise HTTPException(400, "CSV must be UTF-8 encoded") from exc
    logger.info("Import of %s: %d new, %d skipped", file.filename, result.imported, result.skipped)
    return result


@router.get("/export", response_class=PlainTextResponse)
async def export_cards(db: aiosqlite.Connection = Depends(get_db)) -> PlainTextResponse:
    cards, _ = await list_flashcards(db)
    return PlainTextResponse(
        export_csv(cards),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="flashcards.csv"'},
    )


@router.post("/starter", response_model=ImportResult)
async def load_starter(db: aiosqlite.Connection = Depends(get_db)) -> ImportResult:
    store = await CardStore.load(db)
    added = await store.load_starter_vocabulary()
    return ImportResult(imported=len(added), skipped=len(STARTER_VOCABULARY) - len(added))


@router.post("/deduplicate")
async def deduplicate(db: aiosqlite.Connection = Depends(get_db)) -> dict:
    store = await CardStore.load(db)
    return {"removed": await store.deduplicate()}


@router.get("/stats/categories", response_model=dict[str, CategoryStats])
async def category_stats(db: aiosqlite.Connection = Depends(get_db)) -> dict[str, CategoryStats]:
    store = await CardStore.load(db)
    return store.category_stats()


@router.get("/{card_id}", response_model=Flashcard)
async def get_card(card_id: str, db: aiosqlite.Connection = Depends(get_db)) -> Flashcard:
    store = await CardStore.load(db)
    try:
        return store.get_card(card_id)
    except UnknownCard:
        raise HTTPException(404, "Flashcard not found") from None


@router.patch("/{card_id}", response_model=Flashcard)
async def edit_card(
    card_id: str,
    body: FlashcardUpdate,
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    store = await CardStore.load(db)
    try:
        return await store.update_card(card_id, body)
    except UnknownCard:
        raise HTTPException(404, "Flashcard not found") from None


@router.put("/{card_id}/mnemonic", response_model=Flashcard)
async def set_mnemonic(
    card_id: str,
    mnemonic: str = Body(embed=True),
    db: aiosqlite.Connection = Depends(get_db),
) -> Flashcard:
    store = await CardStore.load(db)
    try:
        return await store.update_mnemonic(card_id, mnemonic)
    except UnknownCard:
        raise HTTPException(404, "Flashcard not found") from None


@router.delete("/{card_id}", status_code=204)
async def remove_card(card_id: str, db: aiosqlite.Connection = Depends(get_db)) -> None:
    store = await CardStore.load(db)
    try:
        await store.delete_card(card_id)
    except UnknownCard:
        raise HTTPException(404, "Flashcard not found") from None
