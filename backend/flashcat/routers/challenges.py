from datetime import date

import aiosqlite
from fastapi import APIRouter, Depends

from flashcat.db.sqlite import get_db
from flashcat.models.challenge import DailyChallengeState, WeeklyChallengeState
from flashcat.services import challenges

router = APIRouter()


@router.get("/daily", response_model=DailyChallengeState)
async def daily(db: aiosqlite.Connection = Depends(get_db)) -> DailyChallengeState:
    return await challenges.load_daily_challenges(db, date.today())


@router.get("/weekly", response_model=WeeklyChallengeState)
async def weekly(db: aiosqlite.Connection = Depends(get_db)) -> WeeklyChallengeState:
    return await challenges.load_weekly_challenges(db, date.today())
