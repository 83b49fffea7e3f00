# app/main.py
from datetime import datetime, timezone

from fastapi import FastAPI
from app.api.schema import router as schema_router

app = FastAPI(title="mongoschema - Mongoose schema inference")

app.include_router(schema_router, prefix="")

@app.get("/health")
async def health():
    return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}
