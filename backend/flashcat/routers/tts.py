from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from flashcat.config import settings
from flashcat.models.tts import GenerateAudioRequest, GenerateAudioResponse
from flashcat.services.audio_store import AudioStore
from flashcat.services.tts import INVALID_ARGUMENT, GTTSEngine, TTSError, TTSService

router = APIRouter()


def get_tts_service() -> TTSService:
    store = AudioStore(settings.media_dir, settings.public_base_url)
    return TTSService(store, GTTSEngine(), max_chars=settings.tts_max_chars)


@router.post("/generate", response_model=GenerateAudioResponse)
async def generate_audio(
    body: GenerateAudioRequest,
    service: TTSService = Depends(get_tts_service),
):
    try:
        return await service.generate(body.text, body.language)
    except TTSError as exc:
        status = 400 if exc.code == INVALID_ARGUMENT else 500
        return JSONResponse(
            status_code=status, content={"code": exc.code, "message": exc.message}
        )
