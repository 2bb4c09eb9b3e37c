# src/shinglesim/models/similarity_models.py
from typing import List, Optional
from pydantic import BaseModel, Field

from ..similarity_search import configs
from ..similarity_search.murmur import MASK64


class SimilarityOptions(BaseModel):
    shingle_length: int = Field(configs.SHINGLE_LENGTH, ge=1)
    permutations: int = Field(configs.PERMUTATIONS, ge=1, le=100_000)
    seed: Optional[int] = Field(None, ge=0, le=MASK64)  # random when omitted


class CompareTextRequest(SimilarityOptions):
    text_1: str
    text_2: str


class AverageTextRequest(CompareTextRequest):
    runs: int = Field(configs.RUNS, ge=1, le=100)


class RankRequest(SimilarityOptions):
    name: str  # document listed in the database


class ComparisonResponse(BaseModel):
    similarity: float = Field(..., ge=0.0, le=1.0)
    matches: int
    permutations: int
    seed: int
    shingles_1: int
    shingles_2: int
    name_1: Optional[str] = None
    name_2: Optional[str] = None


class AverageResponse(BaseModel):
    mean: float = Field(..., ge=0.0, le=1.0)
    scores: List[float]
    seeds: List[int]
    name_1: Optional[str] = None
    name_2: Optional[str] = None


class RankedMatchItem(BaseModel):
    name: str
    similarity: Optional[float] = Field(None, ge=0.0, le=1.0)
    matches: Optional[int] = None
    error: Optional[str] = None


class RankResponse(BaseModel):
    name: str
    matches: List[RankedMatchItem]


class DocumentListResponse(BaseModel):
    documents: List[str]
