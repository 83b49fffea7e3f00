# app/api/schema.py
import json
from fastapi import APIRouter, HTTPException
from bson import json_util

from app.models import MongoSchemaRequest, SchemaOptions, SchemaRequest, SchemaResponse
from mongoschema.config import InferenceConfig
from mongoschema.errors import ConfigurationError, EmptySourceError, SourceUnavailableError
from mongoschema.mongo_utils import MongoDocumentSource
from mongoschema.parser import DocumentListSource
from mongoschema.schema_infer import generate_schema

router = APIRouter()


def _config(opts: SchemaOptions) -> InferenceConfig:
    return InferenceConfig(
        type_key=opts.type_key,
        union_policy=opts.union_policy,
        detect_date_strings=opts.detect_date_strings,
    )


def _run(source, cfg: InferenceConfig) -> SchemaResponse:
    try:
        result = generate_schema(source, cfg)
    except EmptySourceError as exc:
        return SchemaResponse(message=str(exc))
    return SchemaResponse(
        schema_text=result.schema,
        paths=result.registry.describe(),
        skipped=result.skipped,
        documents=result.documents,
    )


@router.post("/schema", response_model=SchemaResponse)
def schema_from_documents(req: SchemaRequest):
    try:
        # Extended JSON ($oid, $date, ...) -> native BSON values
        docs = json_util.loads(json.dumps(req.documents))
    except (ValueError, TypeError) as exc:
        raise HTTPException(status_code=422, detail=f"invalid Extended JSON: {exc}")
    try:
        cfg = _config(req).validate()
        source = DocumentListSource(docs, sample_size=req.sample_size)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    return _run(source, cfg)


@router.post("/schema/mongo", response_model=SchemaResponse)
def schema_from_collection(req: MongoSchemaRequest):
    try:
        cfg = _config(req).validate()
        with MongoDocumentSource.connect(req.url, req.collection, db_name=req.db_name,
                                         sample_size=req.sample_size) as source:
            return _run(source, cfg)
    except ConfigurationError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except SourceUnavailableError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
