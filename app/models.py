from pydantic import BaseModel
from typing import Any, Dict, List, Optional, Union


class SchemaOptions(BaseModel):
    type_key: str = "type"
    union_policy: str = "union"
    sample_size: Optional[int] = None
    detect_date_strings: bool = True


class SchemaRequest(SchemaOptions):
    # plain JSON or MongoDB Extended JSON documents
    documents: List[Dict[str, Any]]


class MongoSchemaRequest(SchemaOptions):
    url: str
    collection: str
    db_name: Optional[str] = None


class SchemaResponse(BaseModel):
    schema_text: Optional[str] = None
    message: Optional[str] = None
    paths: Dict[str, Union[str, List[str]]] = {}
    skipped: List[str] = []
    documents: int = 0
