# /gradeflow/routers/transcripts_router.py

from fastapi import APIRouter, Depends

from ..models import transcript_model
from ..services import transcript_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()

@router.post("/rollup", response_model=transcript_model.TranscriptRollup, summary="Roll Up a Student's Transcript")
def rollup_transcript(request: transcript_model.TranscriptRequest, db: DatabaseService = Depends(get_db_service)):
    """Composes per-test outcomes into subject, block and overall outcomes."""
    return transcript_service.build_transcript(request=request, db=db)
