"""
Conversation practice router.

Endpoints:
  GET    /conversation/scenarios        scenario catalog
  POST   /conversation                  start a conversation
  GET    /conversation/{id}             transcript so far
  POST   /conversation/{id}/messages    send a user turn, get the reply
  DELETE /conversation/{id}             end a conversation
"""
from __future__ import annotations

import logging

import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from flashcat.db.sqlite import get_db, get_user_progress, save_user_progress
from flashcat.models.conversation import Conversation, ConversationStart, Scenario, TurnResult, UserTurn
from flashcat.services import conversation as conversations
from flashcat.services import gamification
from flashcat.services.scenario_catalog import SCENARIOS

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/scenarios", response_model=list[Scenario])
async def list_scenarios() -> list[Scenario]:
    return SCENARIOS


@router.post("", response_model=Conversation, status_code=201)
async def start_conversation(body: ConversationStart) -> Conversation:
    return conversations.start_conversation(body.scenario_id)


@router.get("/{conversation_id}", response_model=Conversation)
async def get_transcript(conversation_id: str) -> Conversation:
    try:
        return conversations.get_conversation(conversation_id)
    except conversations.ConversationNotFound:
        raise HTTPException(404, "Conversation not found") from None


@router.post("/{conversation_id}/messages", response_model=TurnResult)
async def send_message(
    conversation_id: str,
    body: UserTurn,
    db: aiosqlite.Connection = Depends(get_db),
) -> TurnResult:
    try:
        conversation = conversations.get_conversation(conversation_id)
    except conversations.ConversationNotFound:
        raise HTTPException(404, "Conversation not found") from None

    turn = conversations.process_user_message(conversation, body.text)
    if turn.xp_awarded:
        # XP is best-effort; the reply is still returned
        try:
            progress, _ = gamification.award_xp(await get_user_progress(db), turn.xp_awarded)
            await save_user_progress(db, progress)
        except Exception:
            logger.warning("Conversation XP update failed for %s", conversation_id)
    return turn


@router.delete("/{conversation_id}", status_code=204)
async def end_conversation(conversation_id: str) -> None:
    try:
        conversations.end_conversation(conversation_id)
    except conversations.ConversationNotFound:
        raise HTTPException(404, "Conversation not found") from None
