import aiosqlite
from fastapi import APIRouter, Depends, HTTPException

from flashcat.db.sqlite import get_db, get_user_progress, list_unlocked_achievements, save_user_progress
from flashcat.models.progress import AchievementStatus, LevelProgress, StreakResult, UserProgress
from flashcat.services import achievements, gamification
from flashcat.services.card_store import CardStore

router = APIRouter()


@router.get("", response_model=UserProgress)
async def get_progress(db: aiosqlite.Connection = Depends(get_db)) -> UserProgress:
    return await get_user_progress(db)


@router.get("/level", response_model=LevelProgress)
async def get_level(db: aiosqlite.Connection = Depends(get_db)) -> LevelProgress:
    progress = await get_user_progress(db)
    return gamification.xp_for_next_level(progress.xp)


@router.post("/streak", response_model=StreakResult)
async def update_streak(db: aiosqlite.Connection = Depends(get_db)) -> StreakResult:
    result = gamification.update_streak(await get_user_progress(db))
    if result.changed:
        await save_user_progress(db, result.progress)
    return result


@router.post("/streak-freeze", response_model=UserProgress)
async def use_streak_freeze(db: aiosqlite.Connection = Depends(get_db)) -> UserProgress:
    progress, used = gamification.use_streak_freeze(await get_user_progress(db))
    if not used:
        raise HTTPException(409, "No streak freeze available")
    await save_user_progress(db, progress)
    return progress


@router.get("/achievements", response_model=list[AchievementStatus])
async def list_achievements(db: aiosqlite.Connection = Depends(get_db)) -> list[AchievementStatus]:
    store = await CardStore.load(db)
    ctx = achievements.AchievementContext(
        progress=await get_user_progress(db),
        card_progress=store.progress,
        flashcards=store.cards,
        unlocked=await list_unlocked_achievements(db),
    )
    return achievements.achievement_statuses(ctx)
