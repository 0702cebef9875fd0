import logging
import threading
from collections import OrderedDict
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field

from markovbox.config import settings
from markovbox.services.markov import train_from_sources
from markovbox.services.packager import render_artifact
from markovbox.services.playback import Limits, PlaybackEngine
from markovbox.services.serializer import ChainBundle, serialize
from markovbox.services.tokenizer import tokenize

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/markov", tags=["markov"])

# In-memory bundle cache, least recently used evicted first
MODEL_CACHE: "OrderedDict[str, ChainBundle]" = OrderedDict()
_CACHE_LOCK = threading.Lock()


class TrainRequest(BaseModel):
    name: str = Field(default="default", min_length=1)
    corpus: List[str] = Field(..., description="One entry per source; the window resets between entries")
    level: int = Field(default_factory=lambda: settings.DEFAULT_LEVEL, ge=1)
    tokenize: bool = False
    strip: bool = False


class GenerateRequest(BaseModel):
    model_name: str = "default"
    max_sentences: Optional[int] = Field(default=None, ge=1)
    max_characters: Optional[int] = Field(default=None, ge=1)


class PackageRequest(BaseModel):
    model_name: str = "default"
    uncompressed: bool = False


def _store(bundle: ChainBundle) -> None:
    with _CACHE_LOCK:
        MODEL_CACHE[bundle.name] = bundle
        MODEL_CACHE.move_to_end(bundle.name)
        while len(MODEL_CACHE) > settings.MAX_CACHED_MODELS:
            evicted, _ = MODEL_CACHE.popitem(last=False)
            logger.info(f"[MARKOV] Evicted model '{evicted}' from cache")


def _lookup(name: str) -> ChainBundle:
    with _CACHE_LOCK:
        bundle = MODEL_CACHE.get(name)
        if bundle is not None:
            MODEL_CACHE.move_to_end(name)
    if bundle is None:
        raise HTTPException(status_code=404, detail="model not found, train first")
    return bundle


@router.post("/train")
def train(req: TrainRequest):
    if not req.corpus:
        raise HTTPException(status_code=400, detail="corpus is empty")

    model = train_from_sources(
        (tokenize(text, punctuation=req.tokenize, strip=req.strip) for text in req.corpus), level=req.level
    )
    _store(serialize(model, req.name))

    stats = model.stats()
    logger.info(f"[MARKOV] Trained '{req.name}': {stats.window_keys} keys, {stats.transitions} transitions")
    return {
        "ok": True,
        "data": {
            "model": req.name,
            "level": stats.level,
            "vocabulary_size": stats.vocabulary_size,
            "window_keys": stats.window_keys,
            "transitions": stats.transitions,
        },
    }


@router.post("/generate")
def generate(req: GenerateRequest):
    bundle = _lookup(req.model_name)
    if req.max_sentences is None and req.max_characters is None:
        limits = Limits(*settings.playback_defaults)
    else:
        # a sentence budget alone never runs out on a chain without sentence marks
        characters = min(req.max_characters or settings.MAX_HTTP_CHARACTERS, settings.MAX_HTTP_CHARACTERS)
        limits = Limits(max_sentences=req.max_sentences, max_characters=characters)

    result = PlaybackEngine(bundle).generate(limits)
    return {"ok": True, "data": {"text": result.text, "reason": result.reason, "restarts": result.restarts}}


@router.get("/models/{name}")
async def get_model(name: str):
    return {"ok": True, "data": _lookup(name).to_dict()}


@router.post("/package", response_class=PlainTextResponse)
def package(req: PackageRequest):
    bundle = _lookup(req.model_name)
    return PlainTextResponse(
        render_artifact(bundle.to_json(), uncompressed=req.uncompressed, defaults=settings.playback_defaults)
    )
