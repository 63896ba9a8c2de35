"""
Study router: due cards, single reviews and study sessions.

Endpoints:
  GET  /study/due                   preview of the next session deck
  GET  /study/counts                due / new counts
  POST /study/review                review one card direction outside a session
  POST /study/sessions              start a session
  GET  /study/sessions/{id}         session state
  POST /study/sessions/{id}/answer  grade the current card
  POST /study/sessions/{id}/next    move to the next card
  POST /study/sessions/{id}/end     finish and get the summary
  GET  /study/mistakes              mistake history, optionally recent only
  GET  /study/mistakes/analysis     error types and confused word pairs
  DELETE /study/mistakes            clear the history
  GET  /study/weakness-deck         weakest pairs, all typed
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException, Query

from flashcat.config import settings
from flashcat.db.sqlite import get_db
from flashcat.models.flashcard import DueCounts, ReviewRequest, ReviewResult, StudyCard
from flashcat.models.mistake import ErrorPatternAnalysis, MistakeRecord
from flashcat.models.session import AnswerRequest, AnswerResult, SessionStart, SessionState, SessionSummary
from flashcat.services import mistakes
from flashcat.services import session as sessions
from flashcat.services.card_store import CardStore, UnknownCard

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/due", response_model=list[StudyCard])
async def get_due(
    limit: int = Query(default=settings.session_card_limit, ge=1, le=200),
    db: aiosqlite.Connection = Depends(get_db),
) -> list[StudyCard]:
    store = await CardStore.load(db)
    return store.study_deck(limit)


@router.get("/counts", response_model=DueCounts)
async def get_counts(db: aiosqlite.Connection = Depends(get_db)) -> DueCounts:
    store = await CardStore.load(db)
    return store.due_counts()


@router.post("/review", response_model=ReviewResult)
async def review_card(
    body: ReviewRequest,
    db: aiosqlite.Connection = Depends(get_db),
) -> ReviewResult:
    """Schedule one direction of a card. Quality wins over grade, grade over correct."""
    if body.quality is not None:
        grade = body.quality
    elif body.grade is not None:
        grade = body.grade
    elif body.correct is not None:
        grade = body.correct
    else:
        raise HTTPException(422, "Provide quality, grade or correct")

    store = await CardStore.load(db)
    try:
        return await store.review(body.card_id, body.direction, grade)
    except UnknownCard:
        raise HTTPException(404, "Flashcard not found") from None


@router.post("/sessions", response_model=SessionState, status_code=201)
async def start_session(
    body: SessionStart,
    db: aiosqlite.Connection = Depends(get_db),
) -> SessionState:
    try:
        session = await sessions.start_session(db, body.mode, body.limit)
    except sessions.NoCardsDue as exc:
        raise HTTPException(404, str(exc)) from exc
    return session.state()


@router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session(session_id: str) -> SessionState:
    try:
        return sessions.get_session(session_id).state()
    except sessions.SessionNotFound:
        raise HTTPException(404, "Session not found") from None


@router.post("/sessions/{session_id}/answer", response_model=AnswerResult)
async def answer(
    session_id: str,
    body: AnswerRequest,
    db: aiosqlite.Connection = Depends(get_db),
) -> AnswerResult:
    try:
        return await sessions.submit_answer(db, session_id, body)
    except sessions.SessionNotFound:
        raise HTTPException(404, "Session not found") from None
    except UnknownCard:
        raise HTTPException(404, "Flashcard no longer exists") from None
    except sessions.InvalidAnswer as exc:
        raise HTTPException(409, str(exc)) from exc


@router.post("/sessions/{session_id}/next", response_model=SessionState)
async def next_card(session_id: str) -> SessionState:
    try:
        return sessions.next_card(session_id)
    except sessions.SessionNotFound:
        raise HTTPException(404, "Session not found") from None


@router.post("/sessions/{session_id}/end", response_model=SessionSummary)
async def end_session(
    session_id: str,
    db: aiosqlite.Connection = Depends(get_db),
) -> SessionSummary:
    try:
        return await sessions.end_session(db, session_id)
    except sessions.SessionNotFound:
        raise HTTPException(404, "Session not found") from None


@router.get("/mistakes", response_model=list[MistakeRecord])
async def list_mistakes(
    days: int | None = Query(default=None, ge=1),
    db: aiosqlite.Connection = Depends(get_db),
) -> list[MistakeRecord]:
    history = await mistakes.load_mistakes(db)
    if days is not None:
        history = mistakes.recent_mistakes(history, days)
    return history


@router.get("/mistakes/analysis", response_model=ErrorPatternAnalysis)
async def analyze_mistakes(
    days: int | None = Query(default=None, ge=1),
    db: aiosqlite.Connection = Depends(get_db),
) -> ErrorPatternAnalysis:
    history = await mistakes.load_mistakes(db)
    if days is not None:
        history = mistakes.recent_mistakes(history, days)
    return mistakes.analyze_error_patterns(history)


@router.delete("/mistakes", status_code=204)
async def clear_mistakes(db: aiosqlite.Connection = Depends(get_db)) -> None:
    await mistakes.clear_mistakes(db)


@router.get("/weakness-deck", response_model=list[StudyCard])
async def get_weakness_deck(
    limit: int = Query(default=mistakes.DEFAULT_WEAKNESS_DECK_LIMIT, ge=1, le=200),
    db: aiosqlite.Connection = Depends(get_db),
) -> list[StudyCard]:
    store = await CardStore.load(db)
    history = await mistakes.load_mistakes(db)
    return mistakes.weakness_deck(store.cards, store.progress, history, limit)
