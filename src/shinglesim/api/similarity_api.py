# src/shinglesim/api/similarity_api.py
import io
import logging

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.concurrency import run_in_threadpool

from shinglesim.ingestion import DocumentDatabase, text_stream
from shinglesim.models.similarity_models import (
    AverageResponse,
    AverageTextRequest,
    CompareTextRequest,
    ComparisonResponse,
    DocumentListResponse,
    RankedMatchItem,
    RankRequest,
    RankResponse,
)
from shinglesim.similarity_search import configs
from shinglesim.similarity_search.configs import SimilaritySettings
from shinglesim.similarity_search.murmur import MASK64
from shinglesim.similarity_search.errors import (
    DocumentNotFoundError,
    DocumentOpenError,
    EmptyInputError,
    InvalidConfigurationError,
)
from shinglesim.similarity_search.pipeline import (
    average_comparison,
    compare_against,
    compare_documents,
    consecutive_seeds,
)
from shinglesim.similarity_search.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/similarity",
    tags=["similarity"]
)


def get_database() -> DocumentDatabase:
    return DocumentDatabase()


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, DocumentNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (EmptyInputError, InvalidConfigurationError)):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, DocumentOpenError):
        return HTTPException(status_code=500, detail=str(e))
    logger.exception("similarity request failed")
    return HTTPException(status_code=500, detail=f"Processing failed: {str(e)}")


@router.post("/compare", response_model=ComparisonResponse)
def compare_texts(request: CompareTextRequest):
    """
    Estimate the similarity of two texts posted in the request body.
    """
    settings = SimilaritySettings(
        shingle_length=request.shingle_length,
        permutations=request.permutations,
    )
    try:
        result = compare_documents(
            Tokenizer(text_stream(request.text_1)),
            Tokenizer(text_stream(request.text_2)),
            settings,
            seed=request.seed,
        )
    except Exception as e:
        raise _http_error(e)
    return ComparisonResponse(**result.to_dict())


@router.post("/average", response_model=AverageResponse)
def average_texts(request: AverageTextRequest):
    """
    Compare two texts `runs` times, each under a fresh seed, and average the scores.
    """
    settings = SimilaritySettings(
        shingle_length=request.shingle_length,
        permutations=request.permutations,
        runs=request.runs,
    )
    seeds = consecutive_seeds(request.seed, request.runs) if request.seed is not None else None
    try:
        averaged = average_comparison(
            Tokenizer(text_stream(request.text_1)),
            Tokenizer(text_stream(request.text_2)),
            settings,
            seeds=seeds,
        )
    except Exception as e:
        raise _http_error(e)
    return AverageResponse(**averaged.to_dict())


@router.post("/compare_files", response_model=ComparisonResponse)
async def compare_files(
    file_1: UploadFile = File(...),
    file_2: UploadFile = File(...),
    shingle_length: int = Query(configs.SHINGLE_LENGTH, ge=1),
    permutations: int = Query(configs.PERMUTATIONS, ge=1, le=100_000),
    seed: Optional[int] = Query(None, ge=0, le=MASK64),
):
    """
    Accepts two uploaded plain-text files and compares them.
    """
    data_1 = await file_1.read()
    data_2 = await file_2.read()
    settings = SimilaritySettings(shingle_length=shingle_length, permutations=permutations)
    try:
        # fingerprinting is CPU bound, keep it off the event loop
        result = await run_in_threadpool(
            compare_documents,
            Tokenizer(io.BytesIO(data_1)),
            Tokenizer(io.BytesIO(data_2)),
            settings,
            seed=seed,
            name_1=file_1.filename,
            name_2=file_2.filename,
        )
    except Exception as e:
        raise _http_error(e)
    return ComparisonResponse(**result.to_dict())


@router.get("/documents", response_model=DocumentListResponse)
def list_documents(db: DocumentDatabase = Depends(get_database)):
    try:
        return DocumentListResponse(documents=db.names())
    except Exception as e:
        raise _http_error(e)


@router.post("/rank", response_model=RankResponse)
def rank_document(request: RankRequest, db: DocumentDatabase = Depends(get_database)):
    """
    Compare one database document against every other listed document,
    most similar first.
    """
    settings = SimilaritySettings(
        shingle_length=request.shingle_length,
        permutations=request.permutations,
    )
    try:
        db.resolve(request.name)
        matches = compare_against(
            db.opener(request.name),
            db.openers(db.others(request.name)),
            settings,
            seed=request.seed,
            query_name=request.name,
        )
    except Exception as e:
        raise _http_error(e)
    return RankResponse(
        name=request.name,
        matches=[RankedMatchItem(**m.to_dict()) for m in matches],
    )
